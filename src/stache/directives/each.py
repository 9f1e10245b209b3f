"""The ``each`` directive: render a block once per element.

    {{#each people as |person i|}}
        {{@index}}: {{person.name}} {{#if @first}}(first){{/if}}
    {{else}}
        nobody here
    {{/each}}

Arrays iterate by ascending position, mappings in insertion order. Each
iteration narrows to ``<path>/<index-or-key>`` and pushes it as a path root,
so ``../`` inside the body climbs out of the current element in one step.
A computed collection (``{{#each (items)}}``) has no path: each element
becomes the current value instead, and no path root is pushed.

Local variables per iteration: ``@index`` (position), ``@key`` (mappings
only), ``@first``, ``@last``. They live in a layer opened for the loop and
dropped afterwards; a nested narrowing directive reaches them as
``@../index``.

Block params: the first name binds the element (by path when the collection
came from a literal path, else by value), the second binds the index or key.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stache.paths import child_path
from stache.render_context import BlockParams
from stache.values import is_truthy, iter_items

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


class EachDirective:
    """Iterate over the first parameter."""

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
        items = iter_items(param.value) if is_truthy(param.value) else None

        if not items:
            if d.inverse is not None:
                d.inverse.render(registry, ctx, rc, out)
            return None
        if d.template is None:
            return None

        is_mapping = isinstance(param.value, Mapping)
        base = param.narrowed_path(rc.get_path())
        last = len(items) - 1

        with rc.local_vars_scope():
            local_rc = rc.derive()
            for index, (key, value) in enumerate(items):
                local_rc.set_local_var("@index", index)
                local_rc.set_local_var("@first", index == 0)
                local_rc.set_local_var("@last", index == last)
                if is_mapping:
                    local_rc.set_local_var("@key", key)

                element_path = child_path(base, key) if base is not None else None
                if element_path is not None:
                    local_rc.push_local_path_root(element_path)
                    local_rc.set_path(element_path)
                else:
                    local_rc.set_current_value(value)
                try:
                    params = self._block_params(d, key, value, element_path)
                    if params is not None:
                        local_rc.push_block_context(params)
                    try:
                        d.template.render(registry, ctx, local_rc, out)
                    finally:
                        if params is not None:
                            local_rc.pop_block_context()
                finally:
                    if element_path is not None:
                        local_rc.pop_local_path_root()
        return None

    @staticmethod
    def _block_params(
        d: Directive, key: Any, value: Any, element_path: str | None
    ) -> BlockParams | None:
        if not d.block_params:
            return None
        params = BlockParams()
        if element_path is not None:
            params.add_path(d.block_params[0], element_path)
        else:
            params.add_value(d.block_params[0], value)
        if len(d.block_params) > 1:
            params.add_value(d.block_params[1], key)
        return params


EACH_DIRECTIVE = EachDirective()
