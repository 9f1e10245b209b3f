"""The ``lookup`` directive: index into a value with a computed key.

    {{lookup cities @index}}
    {{#with (lookup people 0)}}{{name}}{{/with}}

The second parameter is used as a position for sequences and as a key for
mappings. An absent entry yields ``MISSING`` (empty output), or raises
``PathNotFoundError`` in strict mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from stache.environment.exceptions import PathNotFoundError
from stache.paths import get_segment
from stache.values import MISSING

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output


def _segment(key: Any) -> str:
    if isinstance(key, float) and key.is_integer():
        return str(int(key))
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


class LookupDirective:
    """Return ``params[0][params[1]]``."""

    __slots__ = ()

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        collection = d.require_param(0)
        key = d.require_param(1)

        value = MISSING
        if not key.missing and key.value is not None:
            value = get_segment(collection.value, _segment(key.value))

        if value is MISSING and registry.strict_mode:
            raise PathNotFoundError(
                f"{collection.source or '<value>'}[{_segment(key.value)}]",
                template_name=rc.template_name,
                directive=d.name,
                lineno=d.lineno or None,
            )
        return value


LOOKUP_DIRECTIVE = LookupDirective()
