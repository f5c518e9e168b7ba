"""Download full MIME message bodies to scoped temporary files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from urllib.parse import quote

import httpx
import structlog

from .exceptions import BlobFetchError, redact
from .interface import TokenSource

logger = structlog.get_logger()


class BlobFetcher:
    """Streams ``/messages/{id}/$value`` into a new temp file per call.

    The caller owns the returned file and must delete it.  On any failure
    the partially written file is removed before the error propagates.
    Calls for distinct identifiers may run concurrently.
    """

    def __init__(
        self,
        tokens: TokenSource,
        http: httpx.Client,
        *,
        graph_base_url: str = "https://graph.microsoft.com/v1.0",
        temp_dir: Path | None = None,
    ) -> None:
        self._tokens = tokens
        self._http = http
        self._base_url = graph_base_url.rstrip("/")
        self._temp_dir = temp_dir

    def blob_url(self, identifier: str, mailbox: str) -> str:
        return (
            f"{self._base_url}/users/{quote(mailbox, safe='@')}"
            f"/messages/{quote(identifier, safe='')}/$value"
        )

    def fetch_blob(self, identifier: str, mailbox: str) -> Path:
        token = self._tokens.get_token().token
        url = self.blob_url(identifier, mailbox)

        try:
            fd, name = tempfile.mkstemp(
                prefix="exchange-graph-", suffix=".eml", dir=self._temp_dir
            )
        except OSError as exc:
            raise BlobFetchError(
                f"Temp file for message {identifier} could not be created: {exc}",
                identifier=identifier,
            ) from exc

        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as fh:
                size = self._stream_to(fh, url, token, identifier)
        except OSError as exc:
            # close() flushes the buffer, so a full disk can surface here
            path.unlink(missing_ok=True)
            raise BlobFetchError(
                f"Message {identifier} could not be written: {exc}",
                identifier=identifier,
            ) from exc
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.debug("blob_downloaded", identifier=identifier, size=size, path=str(path))
        return path

    def _stream_to(self, fh, url: str, token: str, identifier: str) -> int:
        size = 0
        try:
            with self._http.stream(
                "GET", url, headers={"Authorization": f"Bearer {token}"}
            ) as response:
                if response.is_error:
                    response.read()
                    raise BlobFetchError(
                        redact(
                            f"Message {identifier} download returned HTTP "
                            f"{response.status_code}: {response.text}",
                            token,
                        ),
                        identifier=identifier,
                        status_code=response.status_code,
                    )
                for chunk in response.iter_bytes():
                    fh.write(chunk)
                    size += len(chunk)
        except httpx.HTTPError as exc:
            raise BlobFetchError(
                redact(f"Message {identifier} download failed: {exc}", token),
                identifier=identifier,
            ) from exc
        except OSError as exc:
            raise BlobFetchError(
                f"Message {identifier} could not be written: {exc}",
                identifier=identifier,
            ) from exc
        return size
