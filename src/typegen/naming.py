"""Identifier naming for generated declarations."""

from __future__ import annotations

import re
from json import dumps
from typing import TYPE_CHECKING

from typegen.types import DEFAULT_SCHEMA, TableIdentity

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

# Runs of letters and digits; underscores and punctuation separate them
PART = re.compile(r"[^\W_]+")
IDENTIFIER = re.compile(r"^(?!\d)[\w$]+$")


def _is_boundary(previous: str, char: str, following: str) -> bool:
    """Return whether a new word starts at char."""
    if char.isdigit() != previous.isdigit():
        return True
    if previous.islower() and char.isupper():
        return True
    # Last capital of an acronym run starts the next capitalised word
    return previous.isupper() and char.isupper() and following.islower()


def _split_part(part: str) -> Iterator[str]:
    start = 0
    for index in range(1, len(part)):
        following = part[index + 1 : index + 2]
        if _is_boundary(part[index - 1], part[index], following):
            yield part[start:index]
            start = index
    yield part[start:]


def words(name: str) -> list[str]:
    """Split a name into words on separators, case changes and digits.

    Letters are matched by their Unicode category, so ``größe`` is one word.
    """
    return [word for part in PART.findall(name) for word in _split_part(part)]


def pascal_case(name: str) -> str:
    """Convert name to PascalCase."""
    return "".join(word[0].upper() + word[1:].lower() for word in words(name))


def camel_case(name: str) -> str:
    """Convert name to camelCase."""
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def resolve_name(name: str, overrides: Mapping[str, str]) -> str:
    """Return the override for name, or its PascalCase form."""
    return overrides.get(name) or pascal_case(name)


def schema_prefix(schema: str, overrides: Mapping[str, str]) -> str:
    """Return the declaration prefix for a schema, empty for the default schema."""
    return "" if schema == DEFAULT_SCHEMA else resolve_name(schema, overrides)


def record_name(identity: TableIdentity, overrides: Mapping[str, str]) -> str:
    """Return the record type name of a table, prefixed by its schema."""
    if name := overrides.get(identity.qualified):
        return name
    return schema_prefix(identity.schema, overrides) + resolve_name(
        identity.table,
        overrides,
    )


def enum_member_name(identity: TableIdentity, overrides: Mapping[str, str]) -> str:
    """Return the member name of a table in the table index."""
    return resolve_name(identity.qualified, overrides)


def field_name(
    table: str,
    column: str,
    overrides: Mapping[str, str],
    *,
    camel: bool = True,
) -> str:
    """Return the property name for a column, before sanitizing."""
    if name := overrides.get(f"{table}.{column}"):
        return name
    return (camel_case(column) or column) if camel else column


def literal(text: str) -> str:
    """Render text as a double-quoted string literal."""
    return dumps(text, ensure_ascii=False)


def sanitize(name: str) -> str:
    """Quote a property name unless it is a valid bare identifier."""
    return name if IDENTIFIER.match(name) else literal(name)
