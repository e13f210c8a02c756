"""Schema and table filters from the configured include/exclude lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typegen.types import DEFAULT_SCHEMA, SchemaFilters

if TYPE_CHECKING:
    from collections.abc import Iterable

EXCLUDE_MARKER = "!"


def split_list(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma separated string, or strip the entries of a list."""
    if value is None:
        return []
    entries = value.split(",") if isinstance(value, str) else value
    return [stripped for entry in entries if (stripped := entry.strip())]


def resolve_filters(
    schema: str | Iterable[str] | None = None,
    exclude: str | Iterable[str] | None = None,
) -> SchemaFilters:
    """Partition schema entries into included and ``!``-excluded schemas.

    Only included schemas are queried; a schema in neither list is left out.
    Names are matched exactly as the catalog reports them.
    """
    entries = split_list(schema) if schema is not None else [DEFAULT_SCHEMA]

    include = {entry for entry in entries if not entry.startswith(EXCLUDE_MARKER)}
    excluded = {
        entry.removeprefix(EXCLUDE_MARKER)
        for entry in entries
        if entry.startswith(EXCLUDE_MARKER)
    }

    return SchemaFilters(
        include_schemas=frozenset(include - excluded),
        exclude_schemas=frozenset(excluded),
        exclude_tables=frozenset(split_list(exclude)),
    )
