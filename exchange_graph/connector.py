"""ExchangeGraphReader: the data source the synchronization host talks to.

Wires a single :class:`TokenProvider` into the paginated fetcher and the
blob fetcher, and adapts projected rows to the host's row store.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from pathlib import Path

import httpx
import structlog

from .auth import Clock, TokenProvider, utc_now
from .blob import BlobFetcher
from .config import ExchangeGraphConfig
from .fetcher import PaginatedFetcher
from .interface import DataSourceReader, RowStore
from .models import ControlSignal, FetchSummary, Row, Schema
from .parameters import ProviderParameter, config_to_parameters
from .schema import DEFAULT_SCHEMA

logger = structlog.get_logger()


class ExchangeGraphReader(DataSourceReader):
    """Read-only connector for one Exchange mailbox via Microsoft Graph.

    Pass an ``httpx.Client`` to share a transport; otherwise the reader
    creates one with the configured timeout and closes it in
    :meth:`close`.
    """

    def __init__(
        self,
        config: ExchangeGraphConfig,
        *,
        http: httpx.Client | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config
        self._owns_http = http is None
        self._http = http or httpx.Client(
            timeout=httpx.Timeout(config.http.timeout_seconds),
        )

        self.tokens = TokenProvider(
            config.credentials,
            self._http,
            expiry_margin_seconds=config.http.token_expiry_margin_seconds,
            clock=clock,
        )
        self.fetcher = PaginatedFetcher(
            self.tokens,
            self._http,
            graph_base_url=config.http.graph_base_url,
        )
        self.blobs = BlobFetcher(
            self.tokens,
            self._http,
            graph_base_url=config.http.graph_base_url,
            temp_dir=config.http.temp_dir,
        )

    def get_default_schema(self) -> Schema:
        return DEFAULT_SCHEMA

    def read(
        self,
        store: RowStore,
        included_columns: Collection[str] | None = None,
    ) -> FetchSummary:
        schema = self.get_default_schema()
        included = list(included_columns) if included_columns is not None else schema.names
        mailbox = self.config.mailbox

        def emit(row: Row) -> ControlSignal:
            return store.add_with_identifier(row.identifier, included, row.get)

        logger.info(
            "read_started",
            connector=self.config.name,
            mailbox=mailbox.user_principal_name,
        )
        return self.fetcher.fetch(
            mailbox.user_principal_name,
            mailbox.sender_email,
            schema,
            included,
            emit,
        )

    def get_blob_temp_file(self, identifier: str) -> Path:
        return self.blobs.fetch_blob(identifier, self.config.mailbox.user_principal_name)

    def get_file_name(self, identifier: str) -> str:
        return f"{identifier}.eml"

    def get_initialization_parameters(
        self, encrypt: Callable[[str], str]
    ) -> list[ProviderParameter]:
        return config_to_parameters(self.config, encrypt=encrypt)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> ExchangeGraphReader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
