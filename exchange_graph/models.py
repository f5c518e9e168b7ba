"""Data models shared by the token, fetch, projection and blob components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class LogicalType(str, Enum):
    """Logical column types understood by the row projector."""

    STRING = "string"
    DATETIME = "datetime"


class ControlSignal(str, Enum):
    """Value returned by an emit callback after each row."""

    CONTINUE = "continue"
    ABORT = "abort"


class FetchState(str, Enum):
    """Lifecycle of a single paginated fetch."""

    START = "start"
    FETCHING_PAGE = "fetching_page"
    EMITTING_RECORDS = "emitting_records"
    FOLLOWING_CURSOR = "following_cursor"
    DONE = "done"
    ABORTED = "aborted"
    FAILED = "failed"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token and the instant after which it must not be used."""

    token: str = field(repr=False)
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column of the logical schema exposed to the host."""

    name: str
    logical_type: LogicalType
    is_identifier: bool = False
    is_key: bool = False
    is_read_only: bool = False
    allow_null: bool = False
    display_width: int = -1


@dataclass(frozen=True)
class Schema:
    """Ordered, fixed set of columns."""

    columns: tuple[ColumnDescriptor, ...]

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def identifier(self) -> ColumnDescriptor:
        return next(c for c in self.columns if c.is_identifier)

    def __iter__(self):
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)


@dataclass
class Row:
    """A projected record: identifier plus included column values."""

    identifier: str
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, column: str) -> Any:
        """Field accessor handed to the row store."""
        return self.values.get(column)


@dataclass
class Page:
    """One decoded page of the list endpoint."""

    records: list[dict[str, Any]]
    next_cursor: str | None = None


@dataclass
class FetchSummary:
    """Outcome of a fetch that terminated without error."""

    state: FetchState
    pages: int = 0
    rows: int = 0

    @property
    def aborted(self) -> bool:
        return self.state is FetchState.ABORTED
