"""TypeScript type generation from PostgreSQL schemas."""

from typegen.catalog import CatalogSource, SchemaSource, connect
from typegen.emitter import Emitter
from typegen.main import generate, render, update_types
from typegen.sink import DeclarationSink, StreamSink, open_sink
from typegen.types import Options

__all__ = [
    "CatalogSource",
    "DeclarationSink",
    "Emitter",
    "Options",
    "SchemaSource",
    "StreamSink",
    "connect",
    "generate",
    "open_sink",
    "render",
    "update_types",
]
