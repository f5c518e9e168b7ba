"""Exchange Graph mail connector.

Public API re-exported here for convenience::

    from exchange_graph import ExchangeGraphConfig, ExchangeGraphReader
"""

from .auth import TokenProvider
from .blob import BlobFetcher
from .config import CredentialsConfig, ExchangeGraphConfig, HttpConfig, MailboxConfig
from .connector import ExchangeGraphReader
from .exceptions import (
    AuthenticationError,
    BlobFetchError,
    FetchError,
    GraphConnectorError,
    ProjectionError,
)
from .fetcher import PaginatedFetcher
from .interface import DataSourceReader, RowStore, TokenSource
from .logging import setup_logging
from .models import (
    AccessToken,
    ColumnDescriptor,
    ControlSignal,
    FetchState,
    FetchSummary,
    LogicalType,
    Page,
    Row,
    Schema,
)
from .parameters import ProviderParameter, config_from_parameters, config_to_parameters
from .schema import DEFAULT_SCHEMA, RowProjector
from .store import InMemoryRowStore

__all__ = [
    "DEFAULT_SCHEMA",
    "AccessToken",
    "AuthenticationError",
    "BlobFetchError",
    "BlobFetcher",
    "ColumnDescriptor",
    "ControlSignal",
    "CredentialsConfig",
    "DataSourceReader",
    "ExchangeGraphConfig",
    "ExchangeGraphReader",
    "FetchError",
    "FetchState",
    "FetchSummary",
    "GraphConnectorError",
    "HttpConfig",
    "InMemoryRowStore",
    "LogicalType",
    "MailboxConfig",
    "Page",
    "PaginatedFetcher",
    "ProjectionError",
    "ProviderParameter",
    "Row",
    "RowProjector",
    "RowStore",
    "Schema",
    "TokenProvider",
    "TokenSource",
    "config_from_parameters",
    "config_to_parameters",
    "setup_logging",
]
