"""Schema-driven conversion between entities, rows and records.

A *row* is the positional list of string cells stored in a sheet. A *record*
is the JSON-shaped mapping keyed by column name used in backup files. Both
directions are driven entirely by the schema's ``Column`` descriptors, so there
is no per-entity mapping code here.

Decoding never raises: short rows, unparseable numbers and broken JSON all
resolve to the column's default.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Mapping, Sequence, TypeVar

from lifesync.codec.coerce import (
    as_bool,
    as_identifier,
    as_int,
    as_json,
    as_list,
    as_optional_text,
    as_text,
    as_timestamp,
    bool_cell,
    int_cell,
    json_cell,
    text_cell,
)
from lifesync.codec.schema import CellType, Column, Schema, attr_name

T = TypeVar("T")

Row = list[str]


def decode_cell(value: Any, column: Column) -> Any:
    """Coerce one cell (or record value) to the column's Python type."""
    cell_type = column.cell_type
    if cell_type is CellType.TEXT:
        return as_text(value, column.default_value())
    if cell_type is CellType.OPTIONAL:
        return as_optional_text(value)
    if cell_type is CellType.INT:
        return as_int(value, column.default_value())
    if cell_type is CellType.BOOL:
        return as_bool(value)
    if cell_type is CellType.LIST:
        items = as_list(value)
        if column.item_type is not None:
            return [column.item_type.from_dict(item) for item in items if isinstance(item, dict)]
        return items
    if cell_type is CellType.JSON:
        parsed = as_json(value)
        if column.item_type is not None:
            return column.item_type.from_dict(parsed) if isinstance(parsed, dict) else None
        return parsed
    if cell_type is CellType.ID:
        return as_identifier(value)
    return as_timestamp(value)


def encode_cell(value: Any, column: Column) -> str:
    cell_type = column.cell_type
    if cell_type is CellType.INT:
        return int_cell(value)
    if cell_type is CellType.BOOL:
        return bool_cell(value)
    if cell_type is CellType.LIST:
        return json_cell([_plain(item) for item in value or []])
    if cell_type is CellType.JSON:
        return json_cell(_plain(value))
    return text_cell(value)


def encode_row(entity: Any, schema: Schema) -> Row:
    """Entity -> one string cell per column, in schema order."""
    return [encode_cell(getattr(entity, column.attr), column) for column in schema]


def decode_row(row: Sequence[Any], schema: Schema, entity_type: type[T]) -> T:
    """Row -> entity. Cells past the end of a ragged row read as blank."""
    values = {
        column.attr: decode_cell(row[index] if index < len(row) else "", column)
        for index, column in enumerate(schema)
    }
    return _build(entity_type, values, schema)


def to_record(entity: Any, schema: Schema) -> dict[str, Any]:
    """Entity -> JSON-ready mapping keyed by column name. Unset fields are omitted."""
    record: dict[str, Any] = {}
    for column in schema:
        value = getattr(entity, column.attr)
        if value is None:
            continue
        if column.cell_type is CellType.LIST:
            value = [_plain(item) for item in value]
        elif column.cell_type is CellType.JSON:
            value = _plain(value)
        record[column.name] = value
    return record


def from_record(record: Mapping[str, Any], schema: Schema, entity_type: type[T]) -> T:
    """Record -> entity, with the same defaults as ``decode_row``."""
    values = {column.attr: decode_cell(record.get(column.name), column) for column in schema}
    return _build(entity_type, values, schema)


def _build(entity_type: type[T], values: dict[str, Any], schema: Schema) -> T:
    for column in schema:
        if column.fallback and not values[column.attr]:
            values[column.attr] = values[attr_name(column.fallback)]
    known = {f.name for f in fields(entity_type)}
    return entity_type(**{k: v for k, v in values.items() if k in known})


def _plain(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value
