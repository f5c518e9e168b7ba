"""Capability interfaces the connector core depends on.

The core never inherits host state.  Tokens come from a
:class:`TokenSource`, rows go to a :class:`RowStore`, and the host drives
everything through a :class:`DataSourceReader`.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Collection
from pathlib import Path
from typing import Any

from .models import AccessToken, ControlSignal, FetchSummary, Schema


class TokenSource(abc.ABC):
    """Supplies a currently valid bearer token."""

    @abc.abstractmethod
    def get_token(self) -> AccessToken:
        """Return a token that is valid now, acquiring one if needed."""
        ...


class RowStore(abc.ABC):
    """Destination for projected rows, owned by the host."""

    @abc.abstractmethod
    def add_with_identifier(
        self,
        identifier: str,
        included_columns: Collection[str],
        accessor: Callable[[str], Any],
    ) -> ControlSignal:
        """Store one row and say whether the reader should keep going.

        ``accessor(column_name)`` returns the projected value for each
        column in *included_columns*.
        """
        ...


class DataSourceReader(abc.ABC):
    """Read-only data source as seen by the synchronization host."""

    @abc.abstractmethod
    def get_default_schema(self) -> Schema:
        ...

    @abc.abstractmethod
    def read(
        self,
        store: RowStore,
        included_columns: Collection[str] | None = None,
    ) -> FetchSummary:
        """Stream every row into *store* until exhausted or aborted."""
        ...

    @abc.abstractmethod
    def get_blob_temp_file(self, identifier: str) -> Path:
        """Download the binary payload for *identifier* to a temp file."""
        ...

    def get_file_name(self, identifier: str) -> str:
        return identifier

    def get_file_path(self, identifier: str) -> str:
        return ""
