"""In-memory row store, mainly for embedding and tests."""

from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any

from .interface import RowStore
from .models import ControlSignal


class InMemoryRowStore(RowStore):
    """Keeps every row in a list; optionally aborts after ``max_rows``."""

    def __init__(self, max_rows: int | None = None) -> None:
        self.max_rows = max_rows
        self.rows: list[tuple[str, dict[str, Any]]] = []

    def add_with_identifier(
        self,
        identifier: str,
        included_columns: Collection[str],
        accessor: Callable[[str], Any],
    ) -> ControlSignal:
        self.rows.append((identifier, {name: accessor(name) for name in included_columns}))
        if self.max_rows is not None and len(self.rows) >= self.max_rows:
            return ControlSignal.ABORT
        return ControlSignal.CONTINUE

    @property
    def identifiers(self) -> list[str]:
        return [identifier for identifier, _ in self.rows]
