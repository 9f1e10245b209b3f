"""Boolean helpers, meant as sub-expressions of ``if`` and ``unless``.

    {{#if (gt score 90)}}top marks{{/if}}
    {{#if (eq status "done")}}finished{{/if}}
    {{#unless (and admin (not banned))}}read-only{{/unless}}

``eq`` and ``ne`` compare for equality; a boolean never equals a number.
``gt``, ``gte``, ``lt`` and ``lte`` order numbers against numbers and strings
against strings, and are false for any other pairing. ``and`` and ``or``
apply the truthy rule to every parameter, ``not`` negates one.

Each returns a ``bool``, so used inline (``{{eq a b}}``) they render
``true`` or ``false``.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from stache.directives.base import check_params_found
from stache.values import is_truthy

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def values_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def _ordered(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(left: Any, right: Any) -> bool:
        if _is_number(left) and _is_number(right):
            return op(left, right)
        if isinstance(left, str) and isinstance(right, str):
            return op(left, right)
        return False

    return compare


class CompareDirective:
    """Compare the first two parameters with ``op``."""

    __slots__ = ("op",)

    def __init__(self, op: Callable[[Any, Any], bool]) -> None:
        self.op = op

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        left = d.require_param(0)
        right = d.require_param(1)
        check_params_found(d, registry, rc)
        return self.op(left.value, right.value)


class LogicDirective:
    """``and`` (every parameter truthy) or ``or`` (any parameter truthy)."""

    __slots__ = ("combine",)

    def __init__(self, combine: Callable[[Any], bool]) -> None:
        self.combine = combine

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        d.require_param(0)
        d.require_param(1)
        check_params_found(d, registry, rc)
        return self.combine(is_truthy(p.value) for p in d.params)


class NotDirective:
    __slots__ = ()

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        param = d.require_param(0)
        check_params_found(d, registry, rc)
        return not is_truthy(param.value)


EQ_DIRECTIVE = CompareDirective(values_equal)
NE_DIRECTIVE = CompareDirective(lambda left, right: not values_equal(left, right))
GT_DIRECTIVE = CompareDirective(_ordered(operator.gt))
GTE_DIRECTIVE = CompareDirective(_ordered(operator.ge))
LT_DIRECTIVE = CompareDirective(_ordered(operator.lt))
LTE_DIRECTIVE = CompareDirective(_ordered(operator.le))
AND_DIRECTIVE = LogicDirective(all)
OR_DIRECTIVE = LogicDirective(any)
NOT_DIRECTIVE = NotDirective()
