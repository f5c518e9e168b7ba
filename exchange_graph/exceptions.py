"""Exceptions raised by the Exchange Graph connector.

Every error is fatal to the operation that raised it (a full read or a
single blob download). Messages that may carry upstream text are passed
through :func:`redact` so client secrets and bearer tokens never leak.
"""

from __future__ import annotations

REDACTED = "***"


def redact(text: str, *secrets: str | None) -> str:
    """Replace every non-empty value of *secrets* in *text* with ``***``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


class GraphConnectorError(Exception):
    """Base class for connector errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(GraphConnectorError):
    """Raised when the token request fails or is rejected."""


class FetchError(GraphConnectorError):
    """Raised when a list page cannot be retrieved or decoded."""


class ProjectionError(GraphConnectorError):
    """Raised when a record field cannot be coerced to its column type."""

    def __init__(
        self,
        message: str,
        *,
        column: str | None = None,
        record_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.column = column
        self.record_id = record_id


class BlobFetchError(GraphConnectorError):
    """Raised when a message body download fails or is interrupted."""

    def __init__(
        self,
        message: str,
        *,
        identifier: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.identifier = identifier
