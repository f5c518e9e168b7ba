"""Client-credentials token acquisition with expiry-aware reuse."""

from __future__ import annotations

import math
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx
import structlog

from .config import CredentialsConfig
from .exceptions import AuthenticationError, redact
from .interface import TokenSource
from .models import AccessToken

logger = structlog.get_logger()

Clock = Callable[[], datetime]

# One year; anything longer is not a real token lifetime.
MAX_TOKEN_LIFETIME_SECONDS = 365 * 24 * 3600


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenProvider(TokenSource):
    """Acquires and caches one access token for a single credential set.

    The token is re-requested only when none is held or the held one has
    reached its (margin-adjusted) expiry.  A lock serialises refreshes so
    parallel callers issue a single token request.
    """

    def __init__(
        self,
        credentials: CredentialsConfig,
        http: httpx.Client,
        *,
        expiry_margin_seconds: float = 60.0,
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._margin = timedelta(seconds=expiry_margin_seconds)
        self._clock = clock
        self._token: AccessToken | None = None
        self._lock = threading.Lock()

    def get_token(self) -> AccessToken:
        with self._lock:
            now = self._clock()
            if self._token is None or self._token.is_expired(now):
                self._token = self._request_token(now)
            return self._token

    def _request_token(self, now: datetime) -> AccessToken:
        creds = self._credentials
        secret = creds.client_secret.get_secret_value()
        form = {
            "grant_type": "client_credentials",
            "client_id": creds.client_id,
            "client_secret": secret,
            "scope": creds.scope,
        }

        try:
            response = self._http.post(creds.token_url, data=form)
        except httpx.HTTPError as exc:
            raise AuthenticationError(
                redact(f"Token request failed: {exc}", secret)
            ) from exc

        if response.is_error:
            raise AuthenticationError(
                redact(
                    f"Token request rejected with HTTP {response.status_code}: {response.text}",
                    secret,
                ),
                status_code=response.status_code,
            )

        try:
            body = response.json()
            access_token = body["access_token"]
            expires_in = float(body["expires_in"])
            if not math.isfinite(expires_in) or not 0 <= expires_in <= MAX_TOKEN_LIFETIME_SECONDS:
                raise ValueError("expires_in is out of range")
            if not isinstance(access_token, str) or not access_token:
                raise TypeError("access_token is not a non-empty string")
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError(
                f"Token response is missing or has invalid fields ({type(exc).__name__})",
                status_code=response.status_code,
            ) from exc

        lifetime = timedelta(seconds=expires_in)
        # Never let the margin push expiry before the request time.
        expires_at = now + max(lifetime - self._margin, timedelta(0))

        logger.info(
            "token_acquired",
            tenant_id=creds.tenant_id,
            expires_at=expires_at.isoformat(),
        )
        return AccessToken(token=access_token, expires_at=expires_at)
