"""Key constraint resolution across schemas."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, NamedTuple

from typegen.types import (
    KEY_ROLES,
    AnnotatedColumn,
    ColumnRef,
    ConstraintRole,
    KeyEdge,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typegen.catalog import SchemaSource
    from typegen.types import ColumnMeta, KeyUsage

logger = getLogger(__name__)

type KeyIndexKey = tuple[str, ...]


def referenced_columns(usage: Iterable[KeyUsage]) -> dict[str, ColumnRef]:
    """Map each constraint name to the first referenced column reported for it."""
    references: dict[str, ColumnRef] = {}
    for row in usage:
        references.setdefault(
            row.constraint_name,
            ColumnRef(row.schema, row.table, row.column),
        )
    return references


def resolve_schema_keys(source: SchemaSource, schema: str) -> list[KeyEdge]:
    """Resolve the key edges of a single schema.

    Constraint names are only unique within a schema, so every lookup is
    scoped to the schema being processed.
    """
    constraints = source.list_constraints(schema, KEY_ROLES)
    roles = {
        constraint.constraint_name: ConstraintRole(constraint.constraint_type)
        for constraint in constraints
        if constraint.constraint_type in ConstraintRole
    }
    if not roles:
        logger.debug("No key constraints in schema %s", schema)
        return []

    key_usage = source.list_key_usage(schema, roles.keys())
    foreign_keys = [
        name for name, role in roles.items() if role is ConstraintRole.FOREIGN_KEY
    ]
    references = (
        referenced_columns(source.list_referenced_column_usage(foreign_keys, schema))
        if foreign_keys
        else {}
    )

    edges = [
        KeyEdge(
            schema=usage.schema,
            table=usage.table,
            column=usage.column,
            role=role,
            constraint_name=usage.constraint_name,
            referenced=(
                references.get(usage.constraint_name)
                if role is ConstraintRole.FOREIGN_KEY
                else None
            ),
        )
        for usage in key_usage
        if (role := roles.get(usage.constraint_name)) is not None
    ]
    logger.debug(
        "Resolved %d key edges from %d constraints in schema %s",
        len(edges),
        len(roles),
        schema,
    )
    return edges


def resolve_keys(source: SchemaSource, schemas: Iterable[str]) -> list[KeyEdge]:
    """Resolve key edges schema by schema and concatenate them."""
    return [
        edge
        for schema in sorted(schemas)
        for edge in resolve_schema_keys(source, schema)
    ]


class KeyRoles(NamedTuple):
    """Roles held by one column."""

    is_primary_key: bool = False
    is_unique: bool = False
    is_foreign_key: bool = False
    referenced: ColumnRef | None = None


class KeyIndex:
    """Index of key edges by column.

    By default columns are matched on table and column name only, so
    same-named tables in different schemas share their key roles. With
    ``strict`` the schema is part of the match.
    """

    def __init__(self, edges: Iterable[KeyEdge], *, strict: bool = False) -> None:
        """Build the index from key edges."""
        self.strict = strict
        self._roles: dict[KeyIndexKey, set[ConstraintRole]] = {}
        self._references: dict[KeyIndexKey, ColumnRef | None] = {}
        for edge in edges:
            key = self._key(edge.schema, edge.table, edge.column)
            self._roles.setdefault(key, set()).add(edge.role)
            if edge.role is ConstraintRole.FOREIGN_KEY:
                self._references.setdefault(key, edge.referenced)

    def _key(self, schema: str, table: str, column: str) -> KeyIndexKey:
        return (schema, table, column) if self.strict else (table, column)

    def lookup(self, schema: str, table: str, column: str) -> KeyRoles:
        """Return the roles of a column."""
        key = self._key(schema, table, column)
        roles = self._roles.get(key, set())
        return KeyRoles(
            is_primary_key=ConstraintRole.PRIMARY_KEY in roles,
            is_unique=ConstraintRole.UNIQUE in roles,
            is_foreign_key=ConstraintRole.FOREIGN_KEY in roles,
            referenced=self._references.get(key),
        )


def annotate_columns(
    columns: Iterable[ColumnMeta],
    edges: Iterable[KeyEdge],
    *,
    strict: bool = False,
) -> list[AnnotatedColumn]:
    """Join columns with their key roles."""
    index = KeyIndex(edges, strict=strict)
    return [
        AnnotatedColumn(
            column,
            *index.lookup(column.schema, column.table, column.column),
        )
        for column in columns
    ]
