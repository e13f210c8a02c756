"""Emission of TypeScript declarations in a fixed section order."""

from __future__ import annotations

from enum import IntEnum, auto
from itertools import groupby
from logging import getLogger
from operator import attrgetter
from types import MappingProxyType
from typing import TYPE_CHECKING

from typegen.constraints import annotate_columns, resolve_keys
from typegen.filters import resolve_filters
from typegen.naming import (
    enum_member_name,
    field_name,
    literal,
    record_name,
    resolve_name,
    sanitize,
)
from typegen.type_conversion import column_type, nullable_type
from typegen.types import EnumType, TableIdentity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping

    from typegen.catalog import SchemaSource
    from typegen.sink import DeclarationSink
    from typegen.types import AnnotatedColumn, EnumMember, Options

logger = getLogger(__name__)

HEADER = (
    "// The TypeScript definitions below are automatically generated.\n",
    "// Do not touch them, or risk, your modifications being lost.\n\n",
)

SELF_BRAND_COLUMN = "id"
FOREIGN_BRAND_SUFFIX = "id"


class State(IntEnum):
    """Sections of the output, in the only order they may be written."""

    PREFIX = auto()
    ENUMS = auto()
    TABLE_INDEX = auto()
    TABLE_MAP = auto()
    RECORD_TYPES = auto()
    SUFFIX = auto()
    CLOSED = auto()


def group_rows[T, K](
    rows: Iterable[T],
    key: Callable[[T], K],
) -> Iterator[tuple[K, list[T]]]:
    """Partition ordered rows into contiguous runs sharing the same key."""
    for group_key, group in groupby(rows, key=key):
        yield group_key, list(group)


def enum_types(members: Iterable[EnumMember]) -> list[EnumType]:
    """Collect enum labels into one enum per type name."""
    return [
        EnumType(name, tuple(member.value for member in group))
        for name, group in group_rows(members, attrgetter("key"))
    ]


def table_identities(columns: Iterable[AnnotatedColumn]) -> list[TableIdentity]:
    """Return the distinct tables of the columns in first-seen order."""
    return list(dict.fromkeys(column.identity for column in columns))


class Emitter:
    """Writes enums, the table index, the table map and the record types.

    Sections are written strictly in ``State`` order. The sink is closed once
    when the run ends, whether it succeeds or not.
    """

    def __init__(
        self,
        source: SchemaSource,
        sink: DeclarationSink,
        options: Options | None = None,
    ) -> None:
        """Initialize with a schema source, an output sink and generator options."""
        options = options or {}
        self._source = source
        self._sink = sink
        self.overrides: Mapping[str, str] = MappingProxyType(
            dict(options.get("overrides") or {}),
        )
        self.prefix = options.get("prefix")
        self.suffix = options.get("suffix")
        self.filters = resolve_filters(options.get("schema"), options.get("exclude"))
        self.strict_schema_keys = options.get("strict_schema_keys", False)
        self.camel_case_fields = options.get("camel_case_fields", True)
        self.state: State | None = None

    def _enter(self, state: State) -> None:
        if self.state is not None and state <= self.state:
            msg = f"Cannot enter {state.name} after {self.state.name}"
            raise RuntimeError(msg)
        logger.debug("Writing section %s", state.name)
        self.state = state

    def write(self, *parts: str) -> None:
        """Write text to the sink."""
        if self.state is State.CLOSED:
            msg = "Cannot write after the output is closed"
            raise RuntimeError(msg)
        for part in parts:
            self._sink.write(part)

    def run(self) -> None:
        """Fetch the catalog metadata and write every section."""
        try:
            self.write_prefix()
            enums = self.write_enums(self._source.list_enum_members())
            columns = self.annotated_columns()
            tables = table_identities(columns)
            self.write_table_index(tables)
            self.write_table_map(tables)
            self.write_record_types(columns, enums)
            self.write_suffix()
        finally:
            self.close()

    def annotated_columns(self) -> list[AnnotatedColumn]:
        """Fetch the filtered columns and join them with their key roles."""
        columns = self._source.list_columns(self.filters)
        edges = resolve_keys(self._source, self.filters.include_schemas)
        return annotate_columns(columns, edges, strict=self.strict_schema_keys)

    def write_prefix(self) -> None:
        """Write the generated-code header and the configured prefix."""
        self._enter(State.PREFIX)
        self.write(*HEADER)
        if self.prefix:
            self.write(self.prefix, "\n\n")

    def write_enums(self, members: Iterable[EnumMember]) -> dict[str, str]:
        """Write one constant map and key type per enum.

        Returns the declaration name of each enum type, keyed by type name.
        """
        self._enter(State.ENUMS)
        names: dict[str, str] = {}
        for enum in enum_types(members):
            name = resolve_name(enum.name, self.overrides)
            names[enum.name] = name
            self.write(f"export const {name} = {{\n")
            for value in enum.values:
                self.write(f"  {literal(value)}: {literal(value)},\n")
            self.write("};\n", f"export type {name} = keyof typeof {name};\n\n")
        logger.debug("Wrote %d enums", len(names))
        return names

    def write_table_index(self, tables: Iterable[TableIdentity]) -> None:
        """Write the enumeration of all tables."""
        self._enter(State.TABLE_INDEX)
        self.write("export enum Table {\n")
        for table in tables:
            member = sanitize(enum_member_name(table, self.overrides))
            self.write(f"  {member} = {literal(table.qualified)},\n")
        self.write("}\n\n")

    def write_table_map(self, tables: Iterable[TableIdentity]) -> None:
        """Write the map from table name to record type."""
        self._enter(State.TABLE_MAP)
        self.write("export type Tables = {\n")
        for table in tables:
            record = record_name(table, self.overrides)
            self.write(f"  {literal(table.qualified)}: {record},\n")
        self.write("};\n\n")

    def field_type(
        self,
        column: AnnotatedColumn,
        enums: Mapping[str, str],
        record: str,
    ) -> str:
        """Return the type of a field, branded and with its null union."""
        type_ = column_type(column.meta, enums)
        if column.column == SELF_BRAND_COLUMN and (
            column.is_unique or column.is_primary_key
        ):
            type_ += f" & {{ _brand: {literal(record)} }}"
        if (
            column.is_foreign_key
            and column.column.endswith(FOREIGN_BRAND_SUFFIX)
            and column.referenced is not None
        ):
            target = TableIdentity(column.referenced.schema, column.referenced.table)
            flavor = f"{record_name(target, self.overrides)}Id"
            type_ += f" & {{ __flavor?: {literal(flavor)} }}"
        return nullable_type(type_, nullable=column.nullable)

    def write_record_types(
        self,
        columns: Iterable[AnnotatedColumn],
        enums: Mapping[str, str],
    ) -> None:
        """Write one record type per table."""
        self._enter(State.RECORD_TYPES)
        count = 0
        for table, fields in group_rows(columns, attrgetter("identity")):
            record = record_name(table, self.overrides)
            self.write(f"export type {record} = {{\n")
            for column in fields:
                name = field_name(
                    column.table,
                    column.column,
                    self.overrides,
                    camel=self.camel_case_fields,
                )
                self.write(
                    f"  {sanitize(name)}: {self.field_type(column, enums, record)};\n",
                )
            self.write("};\n\n")
            count += 1
        logger.debug("Wrote %d record types", count)

    def write_suffix(self) -> None:
        """Write the configured suffix."""
        self._enter(State.SUFFIX)
        if self.suffix:
            self.write(self.suffix, "\n")

    def close(self) -> None:
        """Close the sink; further writes are rejected."""
        if self.state is State.CLOSED:
            return
        self.state = State.CLOSED
        self._sink.close()
