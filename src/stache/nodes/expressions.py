"""Expression nodes: the parameters of tags and directives."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stache.nodes.base import Node
from stache.paths import PathExpr


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Literal(Expr):
    """Constant value: string, number, boolean, null."""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class PathLookup(Expr):
    """Path reference: ``{{person.name}}``, ``{{../title}}``, ``{{@index}}``.

    Parameters built from a PathLookup carry path metadata, which is what
    lets ``with`` and ``each`` narrow the context to them.
    """

    path: PathExpr


@dataclass(frozen=True, slots=True)
class Call(Expr):
    """Directive call: ``(lookup items 1)`` or ``{{lookup items 1}}``.

    The result is a computed value with no path metadata.
    """

    name: str
    params: Sequence[Expr] = ()
    hash: Sequence[tuple[str, Expr]] = ()
