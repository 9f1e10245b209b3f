"""Escape functions applied to ``{{expr}}`` output.

``html_escape`` is the registry default. ``no_escape`` suits non-HTML
output (plain text, config files, source code).
"""

from __future__ import annotations

from collections.abc import Callable

EscapeFn = Callable[[str], str]

# Single-pass translate table; covers attribute contexts as well as text
_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "`": "&#x60;",
        "=": "&#x3D;",
    }
)


def html_escape(text: str) -> str:
    """Escape ``& < > " ' ` =`` for safe inclusion in HTML.

    Example:
        >>> html_escape('<a href="x">')
        '&lt;a href&#x3D;&quot;x&quot;&gt;'
    """
    return text.translate(_ESCAPE_TABLE)


def no_escape(text: str) -> str:
    """Return ``text`` unchanged."""
    return text
