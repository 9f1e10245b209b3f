"""Output nodes for the stache template tree."""

from __future__ import annotations

from dataclasses import dataclass

from stache.nodes.base import Node
from stache.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text between tags."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Expression output: ``{{expr}}`` (escaped) or ``{{{expr}}}`` (raw)."""

    expr: Expr
    escape: bool = True
