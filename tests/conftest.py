"""Shared fixtures: an in-memory schema source standing in for the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from typegen.types import (
    ColumnMeta,
    Constraint,
    EnumMember,
    KeyUsage,
    SchemaFilters,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


def column(  # noqa: PLR0913
    table: str,
    name: str,
    udt: str = "text",
    *,
    schema: str = "public",
    nullable: bool = False,
    default: str | None = None,
    data_type: str | None = None,
) -> ColumnMeta:
    """Build a column row, reporting ``_``-prefixed types as arrays."""
    return ColumnMeta(
        schema=schema,
        table=table,
        column=name,
        nullable=nullable,
        default=default,
        type=data_type or ("ARRAY" if udt.startswith("_") else udt),
        udt=udt,
    )


@dataclass
class FakeSource:
    """Schema source answering catalog queries from lists."""

    enums: list[EnumMember] = field(default_factory=list)
    columns: list[ColumnMeta] = field(default_factory=list)
    constraints: dict[str, list[Constraint]] = field(default_factory=dict)
    key_usage: dict[str, list[KeyUsage]] = field(default_factory=dict)
    column_usage: dict[str, list[KeyUsage]] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def list_enum_members(self) -> list[EnumMember]:
        self.calls.append(("enums",))
        return list(self.enums)

    def list_columns(self, filters: SchemaFilters) -> list[ColumnMeta]:
        self.calls.append(("columns",))
        return [
            row
            for row in self.columns
            if row.schema in filters.include_schemas
            and row.schema not in filters.exclude_schemas
            and row.table not in filters.exclude_tables
        ]

    def list_constraints(self, schema: str, kinds: Iterable[str]) -> list[Constraint]:
        self.calls.append(("constraints", schema))
        kinds = set(kinds)
        return [
            constraint
            for constraint in self.constraints.get(schema, [])
            if constraint.constraint_type in kinds
        ]

    def list_key_usage(
        self,
        schema: str,
        constraint_names: Iterable[str],
    ) -> list[KeyUsage]:
        self.calls.append(("key_usage", schema))
        names = set(constraint_names)
        return [
            usage
            for usage in self.key_usage.get(schema, [])
            if usage.constraint_name in names
        ]

    def list_referenced_column_usage(
        self,
        constraint_names: Iterable[str],
        constraint_schema: str | None = None,
    ) -> list[KeyUsage]:
        self.calls.append(("column_usage", constraint_schema or ""))
        names = set(constraint_names)
        schemas = (
            [constraint_schema] if constraint_schema else list(self.column_usage)
        )
        return [
            usage
            for schema in schemas
            for usage in self.column_usage.get(schema, [])
            if usage.constraint_name in names
        ]


class FailingSource(FakeSource):
    """Schema source whose column query fails."""

    def list_columns(self, filters: SchemaFilters) -> list[ColumnMeta]:
        msg = "connection lost"
        raise ConnectionError(msg)


class RecordingSink:
    """Sink recording writes and close calls."""

    def __init__(self) -> None:
        self.parts: list[str] = []
        self.close_calls = 0

    def write(self, text: str) -> None:
        self.parts.append(text)

    def close(self) -> None:
        self.close_calls += 1

    @property
    def text(self) -> str:
        return "".join(self.parts)


@pytest.fixture(name="blog_source")
def create_blog_source() -> FakeSource:
    """A blog database with users, posts, a mood enum and a log schema."""
    return FakeSource(
        enums=[
            EnumMember("mood", "happy"),
            EnumMember("mood", "sad"),
            EnumMember("post_status", "draft"),
            EnumMember("post_status", "published"),
        ],
        columns=[
            column("log", "id", "int4", schema="log"),
            column("log", "message", "text", schema="log"),
            column("log", "user_id", "int4", schema="log", nullable=True),
            column("post", "id", "int4"),
            column("post", "author_id", "int4"),
            column("post", "status", "post_status", data_type="USER-DEFINED"),
            column("post", "tags", "_text", nullable=True),
            column("user", "id", "int4"),
            column("user", "email", "text"),
            column("user", "mood", "mood", nullable=True, data_type="USER-DEFINED"),
        ],
        constraints={
            "public": [
                Constraint("user_pkey", "PRIMARY KEY"),
                Constraint("user_email_key", "UNIQUE"),
                Constraint("post_pkey", "PRIMARY KEY"),
                Constraint("post_author_id_fkey", "FOREIGN KEY"),
            ],
            "log": [
                Constraint("log_pkey", "PRIMARY KEY"),
                Constraint("log_user_id_fkey", "FOREIGN KEY"),
            ],
        },
        key_usage={
            "public": [
                KeyUsage("public", "user", "id", "user_pkey"),
                KeyUsage("public", "user", "email", "user_email_key"),
                KeyUsage("public", "post", "id", "post_pkey"),
                KeyUsage("public", "post", "author_id", "post_author_id_fkey"),
            ],
            "log": [
                KeyUsage("log", "log", "id", "log_pkey"),
                KeyUsage("log", "log", "user_id", "log_user_id_fkey"),
            ],
        },
        column_usage={
            "public": [
                KeyUsage("public", "user", "id", "post_author_id_fkey"),
            ],
            "log": [
                KeyUsage("public", "user", "id", "log_user_id_fkey"),
            ],
        },
    )
