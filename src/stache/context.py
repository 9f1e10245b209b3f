"""Root data of a render."""

from __future__ import annotations

from typing import Any


class Context:
    """Wrap the root data passed to a render call.

    The data is held by reference and never copied; directives narrow to
    parts of it by path.

    Example:
        >>> ctx = Context.wraps({"name": "World"})
        >>> ctx.data["name"]
        'World'
    """

    __slots__ = ("data",)

    def __init__(self, data: Any = None) -> None:
        self.data = {} if data is None else data

    @classmethod
    def wraps(cls, data: Any) -> Context:
        """Return ``data`` if it already is a Context, else wrap it."""
        if isinstance(data, Context):
            return data
        return cls(data)

    def __repr__(self) -> str:
        return f"<Context {type(self.data).__name__}>"
