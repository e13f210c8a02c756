"""Read-only catalog queries against a PostgreSQL database."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import Engine, column, create_engine, make_url, select, table

from typegen.types import (
    ColumnMeta,
    Constraint,
    EnumMember,
    KeyUsage,
    SchemaFilters,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Connection, Select

logger = getLogger(__name__)

DRIVER = "postgresql+psycopg"

PG_TYPE = table("pg_type", column("oid"), column("typname"), schema="pg_catalog")
PG_ENUM = table(
    "pg_enum",
    column("enumtypid"),
    column("enumlabel"),
    column("enumsortorder"),
    schema="pg_catalog",
)
COLUMNS = table(
    "columns",
    column("table_schema"),
    column("table_name"),
    column("column_name"),
    column("ordinal_position"),
    column("is_nullable"),
    column("column_default"),
    column("data_type"),
    column("udt_name"),
    schema="information_schema",
)
TABLE_CONSTRAINTS = table(
    "table_constraints",
    column("table_schema"),
    column("constraint_name"),
    column("constraint_type"),
    schema="information_schema",
)
KEY_COLUMN_USAGE = table(
    "key_column_usage",
    column("table_schema"),
    column("table_name"),
    column("column_name"),
    column("constraint_name"),
    schema="information_schema",
)
CONSTRAINT_COLUMN_USAGE = table(
    "constraint_column_usage",
    column("constraint_schema"),
    column("table_schema"),
    column("table_name"),
    column("column_name"),
    column("constraint_name"),
    schema="information_schema",
)


class SchemaSource(Protocol):
    """Read-only provider of catalog metadata."""

    def list_enum_members(self) -> list[EnumMember]:
        """Return enum labels ordered by type name, then by sort order."""
        ...

    def list_columns(self, filters: SchemaFilters) -> list[ColumnMeta]:
        """Return columns ordered by schema, table and ordinal position."""
        ...

    def list_constraints(
        self,
        schema: str,
        kinds: Iterable[str],
    ) -> list[Constraint]:
        """Return the constraints of the given kinds in one schema."""
        ...

    def list_key_usage(
        self,
        schema: str,
        constraint_names: Iterable[str],
    ) -> list[KeyUsage]:
        """Return the columns participating in the named constraints."""
        ...

    def list_referenced_column_usage(
        self,
        constraint_names: Iterable[str],
        constraint_schema: str | None = None,
    ) -> list[KeyUsage]:
        """Return the referenced columns of the named foreign keys."""
        ...


def enum_members_query() -> Select[tuple[str, str]]:
    """Select enum type names and labels in their defined order."""
    return (
        select(PG_TYPE.c.typname.label("key"), PG_ENUM.c.enumlabel.label("value"))
        .select_from(PG_TYPE.join(PG_ENUM, PG_ENUM.c.enumtypid == PG_TYPE.c.oid))
        .order_by(PG_TYPE.c.typname, PG_ENUM.c.enumsortorder)
    )


def columns_query(filters: SchemaFilters) -> Select[tuple[str, ...]]:
    """Select the columns of included schemas, minus excluded schemas and tables."""
    return (
        select(
            COLUMNS.c.table_schema.label("schema"),
            COLUMNS.c.table_name.label("table"),
            COLUMNS.c.column_name.label("column"),
            (COLUMNS.c.is_nullable == "YES").label("nullable"),
            COLUMNS.c.column_default.label("default"),
            COLUMNS.c.data_type.label("type"),
            COLUMNS.c.udt_name.label("udt"),
        )
        .where(
            COLUMNS.c.table_schema.in_(sorted(filters.include_schemas)),
            COLUMNS.c.table_schema.not_in(sorted(filters.exclude_schemas)),
            COLUMNS.c.table_name.not_in(sorted(filters.exclude_tables)),
        )
        .order_by(
            COLUMNS.c.table_schema,
            COLUMNS.c.table_name,
            COLUMNS.c.ordinal_position,
        )
    )


def constraints_query(schema: str, kinds: Iterable[str]) -> Select[tuple[str, str]]:
    """Select the names and kinds of a schema's constraints."""
    return (
        select(
            TABLE_CONSTRAINTS.c.constraint_name,
            TABLE_CONSTRAINTS.c.constraint_type,
        )
        .where(
            TABLE_CONSTRAINTS.c.table_schema == schema,
            TABLE_CONSTRAINTS.c.constraint_type.in_([str(kind) for kind in kinds]),
        )
        .order_by(TABLE_CONSTRAINTS.c.constraint_name)
    )


def key_usage_query(
    schema: str,
    constraint_names: Iterable[str],
) -> Select[tuple[str, ...]]:
    """Select the columns used by the named constraints of a schema."""
    return (
        select(
            KEY_COLUMN_USAGE.c.table_schema.label("schema"),
            KEY_COLUMN_USAGE.c.table_name.label("table"),
            KEY_COLUMN_USAGE.c.column_name.label("column"),
            KEY_COLUMN_USAGE.c.constraint_name,
        )
        .where(
            KEY_COLUMN_USAGE.c.table_schema == schema,
            KEY_COLUMN_USAGE.c.constraint_name.in_(sorted(constraint_names)),
        )
        .order_by(
            KEY_COLUMN_USAGE.c.table_name,
            KEY_COLUMN_USAGE.c.constraint_name,
            KEY_COLUMN_USAGE.c.column_name,
        )
    )


def column_usage_query(
    constraint_names: Iterable[str],
    constraint_schema: str | None = None,
) -> Select[tuple[str, ...]]:
    """Select the referenced columns of the named constraints.

    The referenced table may live in another schema, so only the schema owning
    the constraint is filtered on.
    """
    query = select(
        CONSTRAINT_COLUMN_USAGE.c.table_schema.label("schema"),
        CONSTRAINT_COLUMN_USAGE.c.table_name.label("table"),
        CONSTRAINT_COLUMN_USAGE.c.column_name.label("column"),
        CONSTRAINT_COLUMN_USAGE.c.constraint_name,
    ).where(CONSTRAINT_COLUMN_USAGE.c.constraint_name.in_(sorted(constraint_names)))
    if constraint_schema is not None:
        query = query.where(
            CONSTRAINT_COLUMN_USAGE.c.constraint_schema == constraint_schema,
        )
    return query.order_by(
        CONSTRAINT_COLUMN_USAGE.c.constraint_name,
        CONSTRAINT_COLUMN_USAGE.c.table_schema,
        CONSTRAINT_COLUMN_USAGE.c.table_name,
        CONSTRAINT_COLUMN_USAGE.c.column_name,
    )


class CatalogSource:
    """Schema source reading the PostgreSQL catalog over one connection."""

    def __init__(self, connection: Connection) -> None:
        """Initialize with an open connection owned by the caller."""
        self._connection = connection

    def list_enum_members(self) -> list[EnumMember]:
        """Return enum labels ordered by type name, then by sort order."""
        rows = self._connection.execute(enum_members_query())
        return [EnumMember._make(row) for row in rows]

    def list_columns(self, filters: SchemaFilters) -> list[ColumnMeta]:
        """Return columns ordered by schema, table and ordinal position."""
        rows = self._connection.execute(columns_query(filters))
        columns = [ColumnMeta._make(row) for row in rows]
        logger.debug("Fetched %d columns", len(columns))
        return columns

    def list_constraints(self, schema: str, kinds: Iterable[str]) -> list[Constraint]:
        """Return the constraints of the given kinds in one schema."""
        rows = self._connection.execute(constraints_query(schema, kinds))
        return [Constraint._make(row) for row in rows]

    def list_key_usage(
        self,
        schema: str,
        constraint_names: Iterable[str],
    ) -> list[KeyUsage]:
        """Return the columns participating in the named constraints."""
        rows = self._connection.execute(key_usage_query(schema, constraint_names))
        return [KeyUsage._make(row) for row in rows]

    def list_referenced_column_usage(
        self,
        constraint_names: Iterable[str],
        constraint_schema: str | None = None,
    ) -> list[KeyUsage]:
        """Return the referenced columns of the named foreign keys."""
        rows = self._connection.execute(
            column_usage_query(constraint_names, constraint_schema),
        )
        return [KeyUsage._make(row) for row in rows]


def connect(url: str) -> Engine:
    """Create an engine for a PostgreSQL URL, defaulting to the psycopg driver."""
    database_url = make_url(url)
    if database_url.drivername in {"postgres", "postgresql"}:
        database_url = database_url.set(drivername=DRIVER)
    return create_engine(database_url)
