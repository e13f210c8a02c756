"""Typed records for catalog metadata and generator options."""

from __future__ import annotations

from enum import StrEnum
from os import PathLike
from typing import TYPE_CHECKING, NamedTuple, NotRequired, TypedDict

if TYPE_CHECKING:
    from collections.abc import Mapping

    from typegen.sink import DeclarationSink, TextStream

DEFAULT_SCHEMA = "public"


class ConstraintRole(StrEnum):
    """Key constraint kinds, valued as the catalog reports them."""

    PRIMARY_KEY = "PRIMARY KEY"
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN KEY"


KEY_ROLES = (
    ConstraintRole.FOREIGN_KEY,
    ConstraintRole.UNIQUE,
    ConstraintRole.PRIMARY_KEY,
)


class EnumMember(NamedTuple):
    """A single label of a native enum type."""

    key: str
    value: str


class EnumType(NamedTuple):
    """A native enum type with its labels in catalog sort order."""

    name: str
    values: tuple[str, ...]


class ColumnMeta(NamedTuple):
    """A column row as reported by ``information_schema.columns``."""

    schema: str
    table: str
    column: str
    nullable: bool
    default: str | None
    type: str  # data_type, e.g. "integer" or "ARRAY"
    udt: str  # udt_name, e.g. "int4" or "_text"


class ColumnRef(NamedTuple):
    """Fully qualified reference to a column."""

    schema: str
    table: str
    column: str


class Constraint(NamedTuple):
    """Name and kind of a table constraint."""

    constraint_name: str
    constraint_type: str


class KeyUsage(NamedTuple):
    """A column participating in a constraint."""

    schema: str
    table: str
    column: str
    constraint_name: str


class KeyEdge(NamedTuple):
    """A column's role in a key constraint."""

    schema: str
    table: str
    column: str
    role: ConstraintRole
    constraint_name: str
    referenced: ColumnRef | None = None  # Only for foreign keys


class TableIdentity(NamedTuple):
    """A table identified by its schema and name."""

    schema: str
    table: str

    @property
    def qualified(self) -> str:
        """Return ``table`` for the default schema and ``schema.table`` otherwise."""
        if self.schema == DEFAULT_SCHEMA:
            return self.table
        return f"{self.schema}.{self.table}"


class AnnotatedColumn(NamedTuple):
    """A column joined with the key roles it holds."""

    meta: ColumnMeta
    is_primary_key: bool = False
    is_unique: bool = False
    is_foreign_key: bool = False
    referenced: ColumnRef | None = None

    @property
    def schema(self) -> str:
        return self.meta.schema

    @property
    def table(self) -> str:
        return self.meta.table

    @property
    def column(self) -> str:
        return self.meta.column

    @property
    def nullable(self) -> bool:
        return self.meta.nullable

    @property
    def identity(self) -> TableIdentity:
        return TableIdentity(self.meta.schema, self.meta.table)


class SchemaFilters(NamedTuple):
    """Concrete include/exclude filters for the column query."""

    include_schemas: frozenset[str]
    exclude_schemas: frozenset[str]
    exclude_tables: frozenset[str]


type Output = str | PathLike[str] | DeclarationSink | TextStream


class Options(TypedDict):
    """Options accepted by the generator."""

    output: NotRequired[Output]
    overrides: NotRequired[Mapping[str, str]]
    prefix: NotRequired[str | None]
    suffix: NotRequired[str | None]
    schema: NotRequired[str | list[str] | None]
    exclude: NotRequired[str | list[str] | None]
    strict_schema_keys: NotRequired[bool]
    camel_case_fields: NotRequired[bool]
