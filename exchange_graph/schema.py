"""Fixed message schema and the projector that maps Graph records onto it."""

from __future__ import annotations

from collections.abc import Callable, Collection
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .exceptions import ProjectionError
from .models import ColumnDescriptor, LogicalType, Row, Schema

IDENTIFIER_FIELD = "id"

DEFAULT_SCHEMA = Schema(
    columns=(
        ColumnDescriptor(
            IDENTIFIER_FIELD, LogicalType.STRING, is_identifier=True, is_key=True
        ),
        ColumnDescriptor("internetMessageId", LogicalType.STRING),
        ColumnDescriptor("subject", LogicalType.STRING, allow_null=True),
        ColumnDescriptor("receivedDateTime", LogicalType.DATETIME),
    )
)

_datetime_adapter = TypeAdapter(datetime)


def _to_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _to_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    parsed = _datetime_adapter.validate_python(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


EXTRACTORS: dict[LogicalType, Callable[[Any], Any]] = {
    LogicalType.STRING: _to_string,
    LogicalType.DATETIME: _to_datetime,
}


class RowProjector:
    """Projects raw JSON records onto a validated :class:`Schema`.

    The schema is checked once at construction: exactly one identifier
    column of string type, unique column names, and a known extractor for
    every logical type.  Per-record work is then a plain lookup.
    """

    def __init__(self, schema: Schema = DEFAULT_SCHEMA) -> None:
        names = schema.names
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate column names in schema: {names}")

        identifiers = [c for c in schema if c.is_identifier]
        if len(identifiers) != 1:
            raise ValueError(
                f"Schema must have exactly one identifier column, found {len(identifiers)}"
            )
        if identifiers[0].logical_type is not LogicalType.STRING:
            raise ValueError("Identifier column must be of string type")

        self._extractors: dict[str, Callable[[Any], Any]] = {}
        for column in schema:
            try:
                self._extractors[column.name] = EXTRACTORS[column.logical_type]
            except KeyError:
                raise ValueError(
                    f"No extractor for column {column.name!r} of type {column.logical_type}"
                ) from None

        self.schema = schema

    def project(
        self,
        record: Any,
        included_columns: Collection[str] | None = None,
    ) -> Row:
        if not isinstance(record, dict):
            raise ProjectionError(f"Record is not a JSON object: {type(record).__name__}")

        identifier = record.get(IDENTIFIER_FIELD)
        if not isinstance(identifier, str):
            raise ProjectionError(
                f"Record has no usable {IDENTIFIER_FIELD!r} field",
                column=IDENTIFIER_FIELD,
            )

        values: dict[str, Any] = {}
        for column in self.schema:
            if included_columns is not None and column.name not in included_columns:
                continue
            raw = record.get(column.name)
            if raw is None:
                values[column.name] = None
                continue
            try:
                values[column.name] = self._extractors[column.name](raw)
            except (TypeError, ValueError, ValidationError) as exc:
                raise ProjectionError(
                    f"Cannot coerce {column.name!r} to {column.logical_type.value} "
                    f"for record {identifier}: {exc}",
                    column=column.name,
                    record_id=identifier,
                ) from exc

        return Row(identifier=identifier, values=values)
