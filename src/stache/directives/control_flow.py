"""The ``if`` and ``unless`` directives.

    {{#if author}}by {{author.name}}{{else}}anonymous{{/if}}
    {{#unless items}}empty{{/unless}}
    {{#if count includeZero=true}}{{count}} items{{/if}}

Neither narrows the context nor binds names; they only pick the main or
else sub-template with the truthy rule. ``0`` is falsy unless the
``includeZero`` hash param is truthy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stache.values import is_truthy

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


class IfDirective:
    """Render the main block when the parameter is truthy (or falsy, negated)."""

    __slots__ = ("negate",)

    def __init__(self, negate: bool = False) -> None:
        self.negate = negate

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        param = d.require_param(0)
        include_zero = is_truthy(d.hash_value("includeZero", False))
        value = is_truthy(param.value, include_zero)
        if self.negate:
            value = not value

        template = d.template if value else d.inverse
        if template is not None:
            template.render(registry, ctx, rc, out)
        return None


IF_DIRECTIVE = IfDirective()
UNLESS_DIRECTIVE = IfDirective(negate=True)
