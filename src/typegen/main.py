"""Main module for generating TypeScript types from a PostgreSQL schema."""

from __future__ import annotations

from io import StringIO
from logging import getLogger
from typing import TYPE_CHECKING

from typegen.catalog import CatalogSource
from typegen.emitter import Emitter
from typegen.sink import StreamSink, open_sink

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from typegen.catalog import SchemaSource
    from typegen.sink import DeclarationSink
    from typegen.types import Options, Output

logger = getLogger(__name__)


def output_target(options: Options) -> Output:
    """Return the configured output target, which is required."""
    if "output" not in options:
        msg = "An output target is required"
        raise ValueError(msg)
    return options["output"]


def emit(source: SchemaSource, sink: DeclarationSink, options: Options) -> None:
    """Run the emitter for an opened sink, which is closed on every path."""
    try:
        emitter = Emitter(source, sink, options)
    except Exception:
        sink.close()
        raise
    emitter.run()


def generate(source: SchemaSource, options: Options) -> None:
    """Write the declarations for a schema source to the configured output."""
    emit(source, open_sink(output_target(options)), options)


def update_types(engine: Engine, options: Options) -> None:
    """Generate TypeScript definitions (types) from a PostgreSQL database.

    The output is opened before connecting and closed even when the connection
    fails. The engine is disposed once generation ends, successfully or not.
    """
    try:
        sink = open_sink(output_target(options))
        try:
            connection = engine.connect()
        except Exception:
            sink.close()
            raise
        with connection:
            emit(CatalogSource(connection), sink, options)
        logger.info("Generated types from %s", engine.url.render_as_string())
    finally:
        engine.dispose()


def render(source: SchemaSource, options: Options | None = None) -> str:
    """Return the declarations for a schema source as a string."""
    buffer = StringIO()
    generate(
        source,
        {**(options or {}), "output": StreamSink(buffer, owned=False)},
    )
    return buffer.getvalue()
