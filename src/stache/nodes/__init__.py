"""Template tree nodes produced by the parser.

All nodes are frozen, slotted dataclasses carrying ``lineno`` and
``col_offset``.
"""

from stache.nodes.base import Node
from stache.nodes.expressions import Call, Expr, Literal, PathLookup
from stache.nodes.output import Data, Output
from stache.nodes.structure import Block, Partial

__all__ = [
    "Block",
    "Call",
    "Data",
    "Expr",
    "Literal",
    "Node",
    "Output",
    "Partial",
    "PathLookup",
]
