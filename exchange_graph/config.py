"""Connector configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via env vars.
The host can also build the same tree from its parameter list, see
:mod:`exchange_graph.parameters`.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class CredentialsConfig(BaseSettings):
    """Client-credentials settings for the Microsoft identity platform."""

    model_config = {"env_prefix": "GRAPH_AUTH_", "frozen": True}

    tenant_id: str = Field(min_length=1, description="Azure AD tenant (directory) ID")
    client_id: str = Field(min_length=1, description="Application (client) ID")
    client_secret: SecretStr = Field(description="Application client secret")
    authority_url: str = Field(
        default="https://login.microsoftonline.com",
        description="Identity platform authority host",
    )
    scope: str = Field(
        default="https://graph.microsoft.com/.default",
        description="Scope requested with the client-credentials grant",
    )

    @property
    def token_url(self) -> str:
        return f"{self.authority_url.rstrip('/')}/{self.tenant_id}/oauth2/v2.0/token"


class MailboxConfig(BaseSettings):
    """Which mailbox to read and which sender to filter on."""

    model_config = {"env_prefix": "GRAPH_MAILBOX_", "frozen": True}

    user_principal_name: str = Field(
        min_length=1,
        description="User mailbox to read mail from",
    )
    sender_email: str = Field(
        min_length=1,
        description="Email address of messages to return from the mailbox",
    )


class HttpConfig(BaseSettings):
    """Graph endpoint and transport settings."""

    model_config = {"env_prefix": "GRAPH_HTTP_", "frozen": True}

    graph_base_url: str = Field(
        default="https://graph.microsoft.com/v1.0",
        description="Base URL of the Graph REST API",
    )
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout")
    token_expiry_margin_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Treat tokens as expired this many seconds early",
    )
    temp_dir: Path | None = Field(
        default=None,
        description="Directory for downloaded message bodies (system temp dir if unset)",
    )


class ExchangeGraphConfig(BaseSettings):
    """Root configuration for a connector instance.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "EXCHANGE_GRAPH_", "frozen": True}

    name: str = Field(default="exchange-graph", description="Connector instance name")

    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    mailbox: MailboxConfig = Field(default_factory=MailboxConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
