"""Block and partial nodes for the stache template tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from stache.nodes.base import Node
from stache.nodes.expressions import Expr

if TYPE_CHECKING:
    from stache.template import Template


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Block directive: ``{{#name p1 key=v as |x|}}...{{else}}...{{/name}}``

    ``template`` and ``inverse`` are the main and else sub-templates. An
    inverted section (``{{^name}}``) is parsed with the two swapped.
    """

    name: str
    params: Sequence[Expr] = ()
    hash: Sequence[tuple[str, Expr]] = ()
    block_params: Sequence[str] = ()
    template: Template | None = None
    inverse: Template | None = None


@dataclass(frozen=True, slots=True)
class Partial(Node):
    """Partial inclusion: ``{{> name}}`` or ``{{> name context}}``."""

    name: str
    context: Expr | None = None
