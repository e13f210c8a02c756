"""Module for loading generator options from TOML files."""

from __future__ import annotations

from pathlib import Path
from tomllib import load
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typegen.types import Options

TOOL_TABLE = "typegen"
OVERRIDE_SEPARATOR = "="

OPTION_KEYS = frozenset(
    (
        "output",
        "overrides",
        "prefix",
        "suffix",
        "schema",
        "exclude",
        "strict_schema_keys",
        "camel_case_fields",
    ),
)


def _option_table(data: dict[str, Any]) -> dict[str, Any]:
    """Return the options table, either ``[tool.typegen]`` or the top level."""
    tool = data.get("tool", {})
    if isinstance(tool, dict) and TOOL_TABLE in tool:
        return tool[TOOL_TABLE]
    return {key: value for key, value in data.items() if key != "tool"}


def load_config(config_location: Path) -> Options:
    """Load options from a TOML file such as ``typegen.toml`` or ``pyproject.toml``."""
    with config_location.open("rb") as f:
        table = _option_table(load(f))

    if unknown := set(table) - OPTION_KEYS:
        msg = f"Unknown options in {config_location}: {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    if "output" in table:
        # Relative output paths are resolved against the config file
        table["output"] = str(config_location.parent / table["output"])

    return cast("Options", table)


def parse_overrides(entries: Iterable[str]) -> dict[str, str]:
    """Parse ``identifier=Name`` entries into an overrides table."""
    overrides: dict[str, str] = {}
    for entry in entries:
        key, separator, name = entry.partition(OVERRIDE_SEPARATOR)
        if not separator or not key.strip() or not name.strip():
            msg = f"Invalid override '{entry}', expected identifier=Name"
            raise ValueError(msg)
        overrides[key.strip()] = name.strip()
    return overrides


def merge_options(base: Options, **overrides: Any) -> Options:  # noqa: ANN401
    """Return base options updated with every explicitly given value."""
    merged: dict[str, Any] = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "overrides":
            merged["overrides"] = {**merged.get("overrides", {}), **value}
        else:
            merged[key] = value
    return cast("Options", merged)
