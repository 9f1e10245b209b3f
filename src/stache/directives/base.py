"""The directive contract.

Every block and inline directive implements one method::

    call(d, registry, ctx, rc, out) -> Any

- ``d``: the ``Directive`` being evaluated: name, resolved positional
  params, hash params, declared block params, main and else sub-templates
- ``registry``: the owning Registry (strict mode, escape, other templates)
- ``ctx``: root data of the render
- ``rc``: the RenderContext to narrow and restore
- ``out``: where rendered text goes

Block directives write to ``out`` and return None. Inline directives may
return a value instead; the renderer writes it (escaped) or, inside a
sub-expression, passes it on as a computed parameter.

Directives are looked up by name in the registry's immutable
name → implementation map. Any object with a matching ``call`` method
qualifies; plain functions are adapted by ``FunctionDirective``.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from stache.environment.exceptions import (
    DirectiveError,
    MissingParameterError,
    PathNotFoundError,
    TemplateError,
)
from stache.paths import join_path

if TYPE_CHECKING:
    from stache.context import Context
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template import Template
    from stache.template.output import Output


@dataclass(frozen=True, slots=True)
class PathAndValue:
    """A resolved parameter.

    Only parameters written as a literal path carry ``path``; literals,
    sub-expression results and values reached through a ``ByValue`` block
    param do not. Directives rely on that flag to decide whether they can
    narrow the context, so it is carried exactly as evaluated and never
    guessed from the value's shape.

    Attributes:
        value: Resolved value (None when missing)
        path: Path the value was found at, if it came from a literal path
        absolute: ``path`` is root-absolute (else relative to the current path)
        missing: The path did not resolve
        source: Parameter text as written, for error messages
    """

    value: Any
    path: str | None = None
    absolute: bool = False
    missing: bool = False
    source: str | None = None

    def narrowed_path(self, current: str) -> str | None:
        """Root-absolute path of this parameter seen from ``current``."""
        if self.path is None:
            return None
        if self.absolute:
            return self.path
        return join_path(current, self.path)


@dataclass(frozen=True, slots=True)
class Directive:
    """One directive invocation, with its parameters already resolved."""

    name: str
    params: tuple[PathAndValue, ...] = ()
    hash: Mapping[str, PathAndValue] = field(default_factory=dict)
    block_params: tuple[str, ...] = ()
    template: Template | None = None
    inverse: Template | None = None
    is_block: bool = False
    lineno: int = 0

    def param(self, index: int) -> PathAndValue | None:
        if 0 <= index < len(self.params):
            return self.params[index]
        return None

    def require_param(self, index: int) -> PathAndValue:
        """Return positional param ``index``.

        Raises:
            MissingParameterError: If the directive was called without it
        """
        param = self.param(index)
        if param is None:
            raise MissingParameterError(self.name, index, lineno=self.lineno or None)
        return param

    def hash_value(self, name: str, default: Any = None) -> Any:
        param = self.hash.get(name)
        if param is None or param.missing:
            return default
        return param.value

    @property
    def block_param(self) -> str | None:
        """First declared block param name, if any."""
        return self.block_params[0] if self.block_params else None


@runtime_checkable
class DirectiveDef(Protocol):
    """Interface implemented by every directive."""

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any: ...


def check_params_found(d: Directive, registry: Registry, rc: RenderContext) -> None:
    """In strict mode, fail on the first parameter whose path did not resolve.

    Raises:
        PathNotFoundError: If strict mode is on and a parameter is missing
    """
    if not registry.strict_mode:
        return
    for param in (*d.params, *d.hash.values()):
        if param.missing:
            raise PathNotFoundError(
                param.source or "<param>",
                template_name=rc.template_name,
                directive=d.name,
                lineno=d.lineno or None,
            )


class FunctionDirective:
    """Adapt a plain function into an inline directive.

    Positional params are passed positionally, hash params as keyword
    arguments, and the return value becomes the directive's value.

    Example:
        >>> registry.register_helper("shout", lambda s: s.upper() + "!")
        >>> registry.render_template("{{shout name}}", {"name": "hi"})
        'HI!'
    """

    __slots__ = ("func",)

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        check_params_found(d, registry, rc)
        args = [p.value for p in d.params]
        kwargs = {name: p.value for name, p in d.hash.items()}
        return self.func(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<FunctionDirective {getattr(self.func, '__name__', self.func)!r}>"


def invoke(
    impl: DirectiveDef,
    d: Directive,
    registry: Registry,
    ctx: Context,
    rc: RenderContext,
    out: Output,
) -> Any:
    """Evaluate a directive, attributing foreign failures to it.

    Template errors (including those raised while the directive renders its
    sub-templates) propagate unchanged. Anything else is wrapped in
    ``DirectiveError`` carrying the directive name, chained to the cause.
    """
    try:
        return impl.call(d, registry, ctx, rc, out)
    except TemplateError:
        raise
    except Exception as exc:
        raise DirectiveError(
            d.name,
            exc,
            template_name=rc.template_name,
            lineno=d.lineno or None,
        ) from exc
