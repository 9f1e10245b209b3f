"""stache Template: a parsed template tree and the walk that renders it.

A Template is an immutable sequence of nodes. Block directives hold their
main and else bodies as Templates too, so rendering a directive body is the
same re-entrant call as rendering a top-level template:

    ```
    Template.render(registry, ctx, rc, out)
    ├── Data      → out.write(text)
    ├── Output    → resolve expression, escape, write
    ├── Block     → build Directive, invoke its implementation
    │                 └── directive renders d.template / d.inverse
    └── Partial   → registry.get_template(name).render(...)
    ```

Every ``render()`` goes through ``rc.descend()``, which bounds the nesting
depth of sub-template renders.

Thread-Safety:
    Templates are frozen after parsing; all render state lives in the
    RenderContext passed in. One Template may be rendered concurrently.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from stache.directives import EACH_DIRECTIVE, WITH_DIRECTIVE
from stache.directives.base import Directive, PathAndValue, invoke
from stache.environment.exceptions import PathNotFoundError, RenderError, build_source_snippet
from stache.nodes import Block, Call, Data, Expr, Literal, Node, Output, Partial, PathLookup
from stache.paths import lookup_path, parse_path, resolve_path
from stache.template.output import StringOutput
from stache.values import MISSING, is_sequence, render_value

if TYPE_CHECKING:
    from stache.context import Context
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output as OutputSink


@dataclass(frozen=True, slots=True)
class Template:
    """Parsed template, or the body of a block directive.

    Attributes:
        name: Template name (shared by the sub-templates of its blocks)
        elements: Nodes rendered in order
        source: Template source, kept on top-level templates for error snippets
    """

    name: str | None
    elements: tuple[Node, ...] = ()
    source: str | None = None

    def render(
        self,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: OutputSink,
    ) -> None:
        """Render this template into ``out``.

        Raises:
            RecursionLimitError: If nesting exceeds ``rc.max_depth``
            TemplateError: Any error raised by a node or directive
        """
        with rc.descend(self.name, self.source):
            for node in self.elements:
                _RENDERERS[type(node)](node, registry, ctx, rc, out)

    def __repr__(self) -> str:
        return f"<Template {self.name or '<string>'!r} ({len(self.elements)} nodes)>"


# =============================================================================
# Parameter evaluation
# =============================================================================


def evaluate_param(
    expr: Expr,
    registry: Registry,
    ctx: Context,
    rc: RenderContext,
) -> PathAndValue:
    """Resolve one parameter expression into a PathAndValue.

    Only PathLookup parameters carry path metadata; literals and
    sub-expressions are computed values.
    """
    if isinstance(expr, Literal):
        return PathAndValue(expr.value, source=repr(expr.value))
    if isinstance(expr, PathLookup):
        resolved = resolve_path(expr.path, rc, ctx.data)
        if resolved.value is MISSING:
            return PathAndValue(
                None,
                path=resolved.path,
                absolute=resolved.absolute,
                missing=True,
                source=expr.path.raw,
            )
        return PathAndValue(
            resolved.value,
            path=resolved.path,
            absolute=resolved.absolute,
            source=expr.path.raw,
        )
    if isinstance(expr, Call):
        value = _evaluate_call(expr, registry, ctx, rc)
        if value is MISSING:
            return PathAndValue(None, missing=True, source=f"({expr.name} ...)")
        return PathAndValue(value, source=f"({expr.name} ...)")
    raise TypeError(f"Unknown expression node: {type(expr).__name__}")


def _build_directive(
    name: str,
    params: tuple[Expr, ...] | list[Expr],
    hash_: tuple[tuple[str, Expr], ...] | list[tuple[str, Expr]],
    registry: Registry,
    ctx: Context,
    rc: RenderContext,
    *,
    lineno: int,
    block_params: tuple[str, ...] = (),
    template: Template | None = None,
    inverse: Template | None = None,
    is_block: bool = False,
) -> Directive:
    return Directive(
        name=name,
        params=tuple(evaluate_param(p, registry, ctx, rc) for p in params),
        hash={key: evaluate_param(value, registry, ctx, rc) for key, value in hash_},
        block_params=tuple(block_params),
        template=template,
        inverse=inverse,
        is_block=is_block,
        lineno=lineno,
    )


def _evaluate_call(expr: Call, registry: Registry, ctx: Context, rc: RenderContext) -> Any:
    """Evaluate a sub-expression to a value.

    A directive that returns None but writes text yields that text.
    """
    impl = registry.get_helper(expr.name)
    if impl is None:
        raise RenderError(
            f"Directive '{expr.name}' not found",
            template_name=rc.template_name,
            directive=expr.name,
            lineno=expr.lineno,
            suggestion=f"Register it with registry.register_helper('{expr.name}', ...)",
        )
    d = _build_directive(expr.name, expr.params, expr.hash, registry, ctx, rc, lineno=expr.lineno)
    scratch = StringOutput()
    result = invoke(impl, d, registry, ctx, rc, scratch)
    if result is None:
        text = scratch.getvalue()
        return text if text else None
    return result


# =============================================================================
# Node renderers
# =============================================================================


def _render_data(node: Data, registry: Registry, ctx: Context, rc: RenderContext, out: OutputSink) -> None:
    out.write(node.value)


def _render_output(
    node: Output, registry: Registry, ctx: Context, rc: RenderContext, out: OutputSink
) -> None:
    expr = node.expr
    if isinstance(expr, PathLookup) and expr.path.is_simple_name:
        # {{name}} calls a directive of that name, if one is registered
        impl = registry.get_helper(expr.path.raw)
        if impl is not None:
            expr = Call(node.lineno, node.col_offset, name=expr.path.raw)

    if isinstance(expr, Call):
        value = _evaluate_call(expr, registry, ctx, rc)
    else:
        param = evaluate_param(expr, registry, ctx, rc)
        if param.missing and registry.strict_mode:
            raise _path_not_found(param, ctx, rc, node.lineno)
        value = param.value

    text = render_value(value)
    out.write(registry.escape(text) if node.escape else text)


def _render_block(
    node: Block, registry: Registry, ctx: Context, rc: RenderContext, out: OutputSink
) -> None:
    impl = registry.get_helper(node.name)
    params = node.params
    if impl is None:
        # Section over a path: arrays iterate, anything else narrows
        lookup = PathLookup(node.lineno, node.col_offset, path=parse_path(node.name))
        params = (lookup, *node.params)
        value = evaluate_param(lookup, registry, ctx, rc).value
        impl = EACH_DIRECTIVE if is_sequence(value) else WITH_DIRECTIVE

    d = _build_directive(
        node.name,
        params,
        node.hash,
        registry,
        ctx,
        rc,
        lineno=node.lineno,
        block_params=tuple(node.block_params),
        template=node.template,
        inverse=node.inverse,
        is_block=True,
    )
    result = invoke(impl, d, registry, ctx, rc, out)
    if result is not None and result is not MISSING:
        out.write(registry.escape(render_value(result)))


def _render_partial(
    node: Partial, registry: Registry, ctx: Context, rc: RenderContext, out: OutputSink
) -> None:
    partial = registry.get_template(node.name)
    if node.context is None:
        partial.render(registry, ctx, rc, out)
        return

    param = evaluate_param(node.context, registry, ctx, rc)
    path = param.narrowed_path(rc.get_path())
    if path is None:
        if param.missing:
            partial.render(registry, ctx, rc, out)
            return
        local_rc = rc.derive()
        local_rc.set_current_value(param.value)
        partial.render(registry, ctx, local_rc, out)
        return
    local_rc = rc.derive()
    with local_rc.local_path_root(path):
        local_rc.set_path(path)
        partial.render(registry, ctx, local_rc, out)


def _path_not_found(
    param: PathAndValue, ctx: Context, rc: RenderContext, lineno: int
) -> PathNotFoundError:
    available: frozenset[str] | None = None
    scope = ctx.data
    if rc.has_current_value():
        scope = rc.current_value
    elif rc.get_path():
        scope = lookup_path(ctx.data, rc.get_path())
    if isinstance(scope, Mapping):
        available = frozenset(str(key) for key in scope)
    snippet = build_source_snippet(rc.source, lineno) if rc.source and lineno else None
    return PathNotFoundError(
        param.source or "<path>",
        available_names=available,
        template_name=rc.template_name,
        lineno=lineno,
        source_snippet=snippet,
    )


_RENDERERS: dict[type[Node], Callable[..., None]] = {
    Data: _render_data,
    Output: _render_output,
    Block: _render_block,
    Partial: _render_partial,
}
