"""Module for mapping PostgreSQL column types to TypeScript types."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from typegen.types import ColumnMeta

logger = getLogger(__name__)

UNKNOWN = "unknown"
ARRAY = "ARRAY"
ARRAY_MARKER = "_"

STRING_TYPES = frozenset(
    (
        "text",
        "citext",
        "money",
        "numeric",
        "int8",
        "char",
        "character",
        "bpchar",
        "varchar",
        "time",
        "tsquery",
        "tsvector",
        "uuid",
        "xml",
        "cidr",
        "inet",
        "macaddr",
    ),
)

NUMBER_TYPES = frozenset(
    (
        "smallint",
        "integer",
        "int",
        "int2",
        "int4",
        "real",
        "float",
        "float4",
        "float8",
    ),
)

DATE_TYPES = frozenset(("date", "timestamp", "timestamptz"))


def json_type(default: str | None) -> str:
    """Narrow a json column by its default literal, e.g. ``'{}'::jsonb``."""
    if default:
        if default.startswith("'{"):
            return "Record<string, unknown>"
        if default.startswith("'["):
            return "unknown[]"
    return UNKNOWN


def udt_to_type(
    udt: str,
    enums: Mapping[str, str],
    default: str | None = None,
) -> str:
    """Map a native type name to a TypeScript type.

    Types without a built-in mapping are looked up among the enum declarations
    and otherwise fall back to ``unknown``.

    Examples:
        int4 -> number
        timestamptz -> Date
        jsonb with default '{}'::jsonb -> Record<string, unknown>
        mood (an enum) -> Mood

    """
    match udt:
        case "bool":
            return "boolean"
        case _ if udt in STRING_TYPES:
            return "string"
        case _ if udt in NUMBER_TYPES:
            return "number"
        case _ if udt in DATE_TYPES:
            return "Date"
        case "json" | "jsonb":
            return json_type(default)
        case "bytea":
            return "Buffer"
        case "interval":
            return "PostgresInterval"
        case _ if udt in enums:
            return enums[udt]
        case _:
            logger.debug("No type mapping for %s, using %s", udt, UNKNOWN)
            return UNKNOWN


def column_type(column: ColumnMeta, enums: Mapping[str, str]) -> str:
    """Map a column to its TypeScript type, wrapping array element types."""
    if column.type == ARRAY:
        element = column.udt.removeprefix(ARRAY_MARKER)
        return f"{udt_to_type(element, enums, column.default)}[]"
    return udt_to_type(column.udt, enums, column.default)


def nullable_type(type_: str, *, nullable: bool) -> str:
    """Add the null union to a type when the column is nullable."""
    return f"{type_} | null" if nullable else type_
