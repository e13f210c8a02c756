"""Command line interface for pg-typegen."""

import logging
import os
import sys
from pathlib import Path
from sys import stdout

from cyclopts import App
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from sqlalchemy.exc import SQLAlchemyError

from typegen.catalog import connect
from typegen.config import load_config, merge_options, parse_overrides
from typegen.main import update_types
from typegen.sink import StreamSink
from typegen.types import Options

app = App(help="Generate TypeScript types from a PostgreSQL database schema")

err_console = Console(stderr=True)

URL_VARIABLE = "DATABASE_URL"


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def validate_output_path(output: Path) -> None:
    """Validate the output directory exists."""
    output_dir = output.parent
    if not output_dir.exists():
        print_error(f"Output directory does not exist: {output_dir}")
        sys.exit(1)
    if not output_dir.is_dir():
        print_error(f"Output path parent is not a directory: {output_dir}")
        sys.exit(1)


def resolve_options(
    config: Path | None,
    override: list[str] | None,
    **values: object,
) -> Options:
    """Combine the config file with the options given on the command line."""
    try:
        base: Options = load_config(config) if config else {}
        overrides = parse_overrides(override) if override else None
    except (OSError, ValueError) as e:
        print_error(str(e))
        sys.exit(1)
    return merge_options(base, overrides=overrides, **values)


@app.command
def generate(  # noqa: PLR0913
    *,
    url: str | None = None,
    output: Path | None = None,
    config: Path | None = None,
    schema: list[str] | None = None,
    exclude: list[str] | None = None,
    prefix: str | None = None,
    suffix: str | None = None,
    override: list[str] | None = None,
    strict_schema_keys: bool | None = None,
    camel_case_fields: bool | None = None,
    verbose: bool = False,
) -> None:
    """Generate TypeScript definitions from a PostgreSQL database."""
    configure_logging(verbose=verbose)

    options = resolve_options(
        config,
        override,
        output=str(output) if output else None,
        schema=schema,
        exclude=exclude,
        prefix=prefix,
        suffix=suffix,
        strict_schema_keys=strict_schema_keys,
        camel_case_fields=camel_case_fields,
    )

    database_url = url or os.environ.get(URL_VARIABLE)
    if not database_url:
        print_error(f"A database URL is required, pass --url or set {URL_VARIABLE}")
        sys.exit(1)

    if "output" in options:
        validate_output_path(Path(str(options["output"])))
        print_info(f"Output: {options['output']}")
    else:
        # Keep stdout open for the caller
        options["output"] = StreamSink(stdout, owned=False)

    print_info(f"Schemas: {options.get('schema') or 'public'}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
        ) as progress:
            progress.add_task("Generating types...", total=None)
            update_types(connect(database_url), options)
    except SQLAlchemyError as e:
        print_error(f"Failed to generate types: {e}")
        sys.exit(1)

    print_success("Type generation completed successfully")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
