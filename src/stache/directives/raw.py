"""The ``raw`` block: emit its body without interpreting tags.

    {{{{raw}}}}
        {{this stays as written}}
    {{{{/raw}}}}

The lexer keeps everything between ``{{{{name}}}}`` and ``{{{{/name}}}}`` as
one text node, so by the time ``raw`` runs its body holds no tags at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


class RawDirective:
    __slots__ = ()

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        if d.template is not None:
            d.template.render(registry, ctx, rc, out)
        return None


RAW_DIRECTIVE = RawDirective()
