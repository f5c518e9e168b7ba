"""Shared test fixtures for the exchange_graph test suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest
import respx

from exchange_graph.config import (
    CredentialsConfig,
    ExchangeGraphConfig,
    HttpConfig,
    MailboxConfig,
)

TENANT_ID = "contoso-tenant"
CLIENT_ID = "app-client-id"
CLIENT_SECRET = "sup3r-s3cret-value"
MAILBOX = "archive@contoso.com"
SENDER = "alerts@vendor.example"

TOKEN_URL = f"https://login.microsoftonline.com/{TENANT_ID}/oauth2/v2.0/token"
GRAPH_URL = "https://graph.microsoft.com/v1.0"
LIST_URL = f"{GRAPH_URL}/users/{MAILBOX}/messages"


class FakeClock:
    """Controllable replacement for ``datetime.now(UTC)``."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def blob_url(identifier: str) -> str:
    return f"{LIST_URL}/{identifier}/$value"


def page(records: list[dict[str, Any]] | None, next_link: str | None = None) -> httpx.Response:
    """Build a list-endpoint response."""
    body: dict[str, Any] = {}
    if records is not None:
        body["value"] = records
    if next_link is not None:
        body["@odata.nextLink"] = next_link
    return httpx.Response(200, json=body)


def message(identifier: str, **fields: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": identifier,
        "internetMessageId": f"<{identifier}@vendor.example>",
        "subject": f"Subject {identifier}",
        "receivedDateTime": "2025-05-30T08:15:00Z",
    }
    record.update(fields)
    return record


@pytest.fixture
def credentials() -> CredentialsConfig:
    return CredentialsConfig(
        tenant_id=TENANT_ID,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
    )


@pytest.fixture
def mailbox_config() -> MailboxConfig:
    return MailboxConfig(user_principal_name=MAILBOX, sender_email=SENDER)


@pytest.fixture
def http_config(tmp_path) -> HttpConfig:
    return HttpConfig(timeout_seconds=5.0, temp_dir=tmp_path)


@pytest.fixture
def config(
    credentials: CredentialsConfig,
    mailbox_config: MailboxConfig,
    http_config: HttpConfig,
) -> ExchangeGraphConfig:
    return ExchangeGraphConfig(
        name="exchange-graph-test",
        credentials=credentials,
        mailbox=mailbox_config,
        http=http_config,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def http() -> Iterator[httpx.Client]:
    with httpx.Client(timeout=5.0) as client:
        yield client


@pytest.fixture
def router() -> Iterator[respx.MockRouter]:
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def token_route(router: respx.MockRouter) -> respx.Route:
    """Token endpoint that hands out ``tok-1``, ``tok-2``, ... for one hour each."""
    issued = 0

    def _issue(request: httpx.Request) -> httpx.Response:
        nonlocal issued
        issued += 1
        return httpx.Response(
            200,
            json={
                "token_type": "Bearer",
                "expires_in": 3600,
                "access_token": f"tok-{issued}",
            },
        )

    return router.post(TOKEN_URL).mock(side_effect=_issue)
