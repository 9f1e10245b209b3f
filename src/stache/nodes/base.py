"""Base node class for the stache template tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all template nodes.

    Nodes track their source location for error reporting and are
    immutable, so one parsed tree can be rendered from many threads.

    """

    lineno: int
    col_offset: int
