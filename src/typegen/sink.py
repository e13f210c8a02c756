"""Output targets for generated declarations."""

from __future__ import annotations

from os import PathLike, fspath
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typegen.types import Output


@runtime_checkable
class TextStream(Protocol):
    """Minimal writable text stream."""

    def write(self, text: str, /) -> int: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class DeclarationSink(Protocol):
    """Ordered write target that must be closed exactly once."""

    def write(self, text: str) -> None: ...

    def close(self) -> None: ...


class StreamSink:
    """Sink writing to a text stream, closing it only when owned."""

    def __init__(self, stream: TextStream, *, owned: bool = True) -> None:
        """Initialize with a stream and whether closing the sink closes the stream."""
        self._stream = stream
        self._owned = owned
        self.closed = False

    def write(self, text: str) -> None:
        """Write text to the stream."""
        if self.closed:
            msg = "Cannot write to a closed sink"
            raise RuntimeError(msg)
        self._stream.write(text)

    def close(self) -> None:
        """Flush and release the stream."""
        if self.closed:
            return
        self.closed = True
        self._stream.flush()
        if self._owned:
            self._stream.close()


def open_sink(output: Output) -> DeclarationSink:
    """Return a sink for a file path, an existing sink or a writable stream.

    Paths are opened as UTF-8 files. Streams are handed over to the sink and
    closed with it; wrap a stream in ``StreamSink(stream, owned=False)`` to
    keep it open.
    """
    if isinstance(output, str | PathLike):
        return StreamSink(open(fspath(output), "w", encoding="utf-8"))  # noqa: SIM115
    if isinstance(output, StreamSink):
        return output
    if isinstance(output, TextStream):
        return StreamSink(output)
    if isinstance(output, DeclarationSink):
        return output
    msg = f"Unsupported output target: {type(output).__name__}"
    raise TypeError(msg)
