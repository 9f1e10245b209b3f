"""Output sinks receiving rendered text.

Rendering writes text in order through ``Output.write``. A failure in the
middle of a render leaves whatever was already written in place: there is
no rollback.
"""

from __future__ import annotations

from typing import Protocol, TextIO


class Output(Protocol):
    """Anything that accepts ordered text writes."""

    def write(self, text: str) -> None: ...


class StringOutput:
    """Collect output in memory.

    StringBuilder pattern: chunks are appended to a list and joined once,
    O(n) in the output size.

    Example:
        >>> out = StringOutput()
        >>> out.write("Hello, ")
        >>> out.write("World")
        >>> out.getvalue()
        'Hello, World'
    """

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf: list[str] = []

    def write(self, text: str) -> None:
        if text:
            self._buf.append(text)

    def getvalue(self) -> str:
        return "".join(self._buf)


class StreamOutput:
    """Forward output to a text stream (file, socket wrapper, ``sys.stdout``)."""

    __slots__ = ("_stream",)

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, text: str) -> None:
        if text:
            self._stream.write(text)
