"""Tests for identifier naming."""

import pytest

from typegen.naming import (
    camel_case,
    enum_member_name,
    field_name,
    pascal_case,
    record_name,
    resolve_name,
    sanitize,
    schema_prefix,
    words,
)
from typegen.types import TableIdentity


def test_words_split_on_separators() -> None:
    """Test names are split on non-alphanumeric characters."""
    assert words("identity_provider.linkedin") == ["identity", "provider", "linkedin"]


def test_words_split_on_case_and_digits() -> None:
    """Test names are split on case changes and digit runs."""
    assert words("userID2fa") == ["user", "ID", "2", "fa"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("größe", ["größe"]),
        ("café_order", ["café", "order"]),
        ("naïve_id", ["naïve", "id"]),
        ("ÉtatCivil", ["État", "Civil"]),
        ("HTTPServer", ["HTTP", "Server"]),
    ],
)
def test_words_keep_non_ascii_letters(name: str, expected: list[str]) -> None:
    """Test accented and other non-ASCII letters stay inside their words."""
    assert words(name) == expected


def test_pascal_case() -> None:
    """Test PascalCase conversion."""
    assert pascal_case("user") == "User"
    assert pascal_case("post_status") == "PostStatus"
    assert pascal_case("log.message") == "LogMessage"
    assert pascal_case("USER_ACCOUNT") == "UserAccount"
    assert pascal_case("größe") == "Größe"
    assert pascal_case("café_order") == "CaféOrder"


def test_pascal_case_degenerate() -> None:
    """Test names without words give an empty string."""
    assert pascal_case("__") == ""
    assert pascal_case("") == ""


def test_camel_case() -> None:
    """Test camelCase conversion."""
    assert camel_case("author_id") == "authorId"
    assert camel_case("id") == "id"
    assert camel_case("created_at") == "createdAt"
    assert camel_case("naïve_id") == "naïveId"


def test_resolve_name_prefers_override() -> None:
    """Test overrides are used verbatim."""
    overrides = {"identity_provider": "IdP"}
    assert resolve_name("identity_provider", overrides) == "IdP"
    assert resolve_name("user", overrides) == "User"


def test_schema_prefix() -> None:
    """Test only non-default schemas are prefixed."""
    assert schema_prefix("public", {}) == ""
    assert schema_prefix("log", {}) == "Log"
    assert schema_prefix("auth", {"auth": "Security"}) == "Security"


def test_record_name() -> None:
    """Test record names are schema qualified outside the default schema."""
    assert record_name(TableIdentity("public", "user"), {}) == "User"
    assert record_name(TableIdentity("log", "message"), {}) == "LogMessage"


def test_record_name_overrides() -> None:
    """Test table and qualified-table overrides."""
    overrides = {"user": "Account"}
    assert record_name(TableIdentity("public", "user"), overrides) == "Account"
    assert record_name(TableIdentity("log", "user"), overrides) == "LogAccount"
    assert (
        record_name(TableIdentity("log", "message"), {"log.message": "Entry"})
        == "Entry"
    )


def test_enum_member_name() -> None:
    """Test table index member names."""
    assert enum_member_name(TableIdentity("public", "user"), {}) == "User"
    assert enum_member_name(TableIdentity("log", "message"), {}) == "LogMessage"
    overrides = {"log.message": "Message"}
    assert enum_member_name(TableIdentity("log", "message"), overrides) == "Message"


def test_field_name() -> None:
    """Test field names are camel-cased unless overridden or preserved."""
    assert field_name("post", "author_id", {}) == "authorId"
    assert field_name("post", "author_id", {}, camel=False) == "author_id"
    assert field_name("post", "author_id", {"post.author_id": "writer"}) == "writer"


def test_field_name_without_words_is_kept() -> None:
    """Test names without alphanumeric words are kept as they are."""
    assert field_name("t", "?", {}) == "?"


def test_sanitize_valid_identifiers() -> None:
    """Test valid identifiers are left bare."""
    assert sanitize("id") == "id"
    assert sanitize("$value") == "$value"
    assert sanitize("_private1") == "_private1"
    assert sanitize("naïveId") == "naïveId"


def test_sanitize_quotes_invalid_identifiers() -> None:
    """Test invalid identifiers are quoted."""
    assert sanitize("first name") == '"first name"'
    assert sanitize("2fa") == '"2fa"'
    assert sanitize("a-b") == '"a-b"'
    assert sanitize('say "hi"') == '"say \\"hi\\""'
