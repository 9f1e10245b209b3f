"""The ``with`` directive: narrow the context to one value.

    {{#with person.addr as |a|}}
        {{city}}, {{a.country}} ({{../person.name}})
    {{else}}
        no address
    {{/with}}

``with`` is the reference implementation of the narrowing protocol every
other block directive follows:

1. Require the single positional parameter.
2. Decide the branch. Presence semantics: ``0`` counts as present, so
   ``{{#with count}}`` renders the main block for a zero count.
3. Open a local-variable save point on the parent context.
4. Derive a child context.
5. If the parameter was a literal path, push the narrowed path as a new
   path root (so ``../`` inside the block climbs out of it).
6. If present, narrow the current path (or, for a computed value, make the
   value itself current) and bind the block param, by path when there is
   one, else by value.
7. Render the main or else sub-template into ``out``.
8. Unwind in reverse order, whatever step 7 did.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stache.environment.exceptions import RenderError
from stache.render_context import BlockParams
from stache.values import is_truthy

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


class WithDirective:
    """Narrow rendering to the value of the first parameter."""

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
        if len(d.params) > 1:
            raise RenderError(
                f"Directive 'with' takes exactly one parameter, got {len(d.params)}",
                template_name=rc.template_name,
                directive=d.name,
                lineno=d.lineno or None,
            )

        not_empty = is_truthy(param.value, include_zero=True)
        template = d.template if not_empty else d.inverse

        with rc.local_vars_scope():
            local_rc = rc.derive()
            path_root = param.narrowed_path(rc.get_path())
            if path_root is not None:
                local_rc.push_local_path_root(path_root)
            try:
                pushed_block_params = False
                if not_empty:
                    if path_root is not None:
                        local_rc.set_path(path_root)
                    else:
                        local_rc.set_current_value(param.value)
                    if d.block_param is not None:
                        params = BlockParams()
                        if path_root is not None:
                            params.add_path(d.block_param, local_rc.get_path())
                        else:
                            params.add_value(d.block_param, param.value)
                        local_rc.push_block_context(params)
                        pushed_block_params = True
                try:
                    if template is not None:
                        template.render(registry, ctx, local_rc, out)
                finally:
                    if pushed_block_params:
                        local_rc.pop_block_context()
            finally:
                if path_root is not None:
                    local_rc.pop_local_path_root()
        return None


WITH_DIRECTIVE = WithDirective()
