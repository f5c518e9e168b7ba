"""Conversion between the host's key/value parameter list and config.

The host persists connector settings as a flat list of named string
parameters, with the client secret encrypted by the host.  Encryption is
the host's business: callers pass ``encrypt``/``decrypt`` callables.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from pydantic import BaseModel, Field

from .config import CredentialsConfig, ExchangeGraphConfig, MailboxConfig

TENANT_ID = "TenantId"
CLIENT_ID = "ClientId"
CLIENT_SECRET = "ClientSecret"
USER_PRINCIPAL_NAME = "UserPrincipalName"
SENDER_EMAIL = "SenderEmail"


class ProviderParameter(BaseModel):
    """A single persisted connector setting."""

    name: str = Field(description="Parameter name")
    value: str | None = Field(default=None, description="Parameter value (secret is encrypted)")


def config_from_parameters(
    parameters: Iterable[ProviderParameter],
    *,
    decrypt: Callable[[str], str],
    **overrides,
) -> ExchangeGraphConfig:
    """Build an :class:`ExchangeGraphConfig` from host parameters.

    Unknown parameter names are ignored.  Settings missing from the list
    fall back to environment variables; if still missing, pydantic raises
    a ``ValidationError``.
    """
    values = {p.name: p.value for p in parameters if p.value is not None}

    credentials: dict[str, object] = {}
    if TENANT_ID in values:
        credentials["tenant_id"] = values[TENANT_ID]
    if CLIENT_ID in values:
        credentials["client_id"] = values[CLIENT_ID]
    if CLIENT_SECRET in values:
        credentials["client_secret"] = decrypt(values[CLIENT_SECRET])

    mailbox: dict[str, object] = {}
    if USER_PRINCIPAL_NAME in values:
        mailbox["user_principal_name"] = values[USER_PRINCIPAL_NAME]
    if SENDER_EMAIL in values:
        mailbox["sender_email"] = values[SENDER_EMAIL]

    return ExchangeGraphConfig(
        credentials=CredentialsConfig(**credentials),
        mailbox=MailboxConfig(**mailbox),
        **overrides,
    )


def config_to_parameters(
    config: ExchangeGraphConfig,
    *,
    encrypt: Callable[[str], str],
) -> list[ProviderParameter]:
    """Return the parameter list the host should persist for *config*."""
    creds = config.credentials
    return [
        ProviderParameter(name=TENANT_ID, value=creds.tenant_id),
        ProviderParameter(name=CLIENT_ID, value=creds.client_id),
        ProviderParameter(
            name=CLIENT_SECRET,
            value=encrypt(creds.client_secret.get_secret_value()),
        ),
        ProviderParameter(name=USER_PRINCIPAL_NAME, value=config.mailbox.user_principal_name),
        ProviderParameter(name=SENDER_EMAIL, value=config.mailbox.sender_email),
    ]
