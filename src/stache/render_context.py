"""stache RenderContext: per-render scope state.

The RenderContext answers "where am I in the data" while a template tree is
walked. Directives narrow it on entry and restore it on exit:

- ``path``: current path, the base for relative lookups
- ``path_roots``: one root per enclosing narrowing directive; ``../``
  climbs this stack
- ``block_params``: one ``BlockParams`` frame per directive that declared
  ``as |name|``; searched innermost first. Each frame remembers the
  path-root depth it was pushed at, so ``../x`` only sees frames declared
  at or outside the level it climbs to
- ``current_value``: the value relative paths resolve against when the
  scope was narrowed to a computed value that has no path in the data
  (``{{#each (items)}}``); ``MISSING`` otherwise
- ``local_vars``: layered directive-local variables (``@index``,
  ``@first``...); ``promote_local_vars`` opens a layer and
  ``demote_local_vars`` discards it with everything assigned inside
- ``depth`` / ``max_depth``: nested sub-template renders, bounded so a
  partial that includes itself fails fast

Every push made while evaluating one directive is popped before that
directive returns, whether rendering succeeded or raised. The context
managers (``local_vars_scope``, ``local_path_root``, ``block_context``,
``descend``) give that guarantee structurally; the bare push/pop methods
are the primitives they are built on.

Thread Safety:
    Not shared. One RenderContext per render call, owned by the thread
    doing the render. ``derive()`` gives a nested directive its own copy.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from stache.values import MISSING

# 50 is deep enough for any real template while catching runaway
# partial recursion long before the Python stack runs out.
DEFAULT_MAX_DEPTH = 50


@dataclass(frozen=True, slots=True)
class BlockParam:
    """One block param binding.

    Exactly one of ``path`` and ``value`` is meaningful: a ``ByPath`` binding
    is re-resolved against the data on every use, a ``ByValue`` binding holds
    a captured value (the parameter was computed, so it has no path).
    """

    path: str | None = None
    value: Any = None


def ByPath(path: str) -> BlockParam:  # noqa: N802
    """Bind a name to a location in the data."""
    return BlockParam(path=path)


def ByValue(value: Any) -> BlockParam:  # noqa: N802
    """Bind a name to a captured value."""
    return BlockParam(value=value)


class BlockParams:
    """One frame of ``as |name ...|`` bindings.

    Built fresh for each directive invocation, then pushed with
    ``RenderContext.push_block_context``. Adding a name twice to the same
    frame raises ``ParameterRedefinitionError``; nested frames may reuse
    (shadow) an outer frame's names.

    Example:
        >>> params = BlockParams()
        >>> params.add_path("a", "person/addr")
        >>> params.add_value("i", 0)
        >>> params.get("a")
        BlockParam(path='person/addr', value=None)
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, BlockParam] = {}

    def _add(self, name: str, param: BlockParam) -> None:
        from stache.environment.exceptions import ParameterRedefinitionError

        if name in self._data:
            raise ParameterRedefinitionError(name)
        self._data[name] = param

    def add_path(self, name: str, path: str) -> None:
        self._add(name, ByPath(path))

    def add_value(self, name: str, value: Any) -> None:
        self._add(name, ByValue(value))

    def get(self, name: str) -> BlockParam | None:
        return self._data.get(name)

    def names(self) -> list[str]:
        return list(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"<BlockParams {self._data!r}>"


class ScopeDepth(NamedTuple):
    """Stack depths of a RenderContext, for balance checks."""

    path_roots: int
    block_params: int
    local_vars: int
    depth: int


@dataclass
class RenderContext:
    """Per-render scope state.

    Attributes:
        path: Current path (root-absolute path string, ``""`` is the root)
        path_roots: Stack of path roots, one per narrowing directive
        block_params: Stack of BlockParams frames
        block_param_levels: Path-root depth each frame was pushed at
        current_value: Computed value the scope is narrowed to, or MISSING
        local_vars: Stack of local-variable layers; never empty
        depth: Current nesting of sub-template renders
        max_depth: Limit for ``depth``
        template_name: Name of the template being rendered (for errors)
        source: Source of that template, for error snippets
    """

    path: str = ""
    path_roots: list[str] = field(default_factory=list)
    block_params: list[BlockParams] = field(default_factory=list)
    block_param_levels: list[int] = field(default_factory=list)
    current_value: Any = MISSING
    local_vars: list[dict[str, Any]] = field(default_factory=lambda: [{}])
    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    template_name: str | None = None
    source: str | None = None

    # -- current path ---------------------------------------------------

    def get_path(self) -> str:
        return self.path

    def set_path(self, path: str) -> None:
        """Narrow to a location in the data; drops any computed current value."""
        self.path = path
        self.current_value = MISSING

    def set_current_value(self, value: Any) -> None:
        """Narrow to a computed value that has no path in the data.

        Relative lookups walk ``value`` instead of the current path until the
        next ``set_path``. ``../`` and the path roots are unaffected.
        """
        self.current_value = value

    def has_current_value(self) -> bool:
        return self.current_value is not MISSING

    # -- path roots -----------------------------------------------------

    def push_local_path_root(self, path: str) -> None:
        """Push a new base for ``../`` climbing (usually the narrowed path)."""
        self.path_roots.append(path)

    def pop_local_path_root(self) -> str:
        from stache.environment.exceptions import ScopeStackError

        if not self.path_roots:
            raise ScopeStackError(
                "pop_local_path_root() without a matching push",
                template_name=self.template_name,
            )
        return self.path_roots.pop()

    def get_path_root(self, up: int) -> str:
        """Base reached by popping ``up`` levels off a copy of the root stack.

        Climbing past the bottom of the stack reaches the data root.
        """
        if up <= 0:
            return self.path
        if len(self.path_roots) > up:
            return self.path_roots[-1 - up]
        return ""

    @contextmanager
    def local_path_root(self, path: str) -> Iterator[None]:
        self.push_local_path_root(path)
        try:
            yield
        finally:
            self.pop_local_path_root()

    # -- block params ---------------------------------------------------

    def push_block_context(self, params: BlockParams) -> None:
        self.block_params.append(params)
        self.block_param_levels.append(len(self.path_roots))

    def pop_block_context(self) -> BlockParams:
        from stache.environment.exceptions import ScopeStackError

        if not self.block_params:
            raise ScopeStackError(
                "pop_block_context() without a matching push",
                template_name=self.template_name,
            )
        self.block_param_levels.pop()
        return self.block_params.pop()

    def get_block_param(self, name: str, up: int = 0) -> BlockParam | None:
        """Find ``name`` in the block param frames, innermost first.

        With ``up`` > 0 only frames pushed at or outside the level reached by
        climbing ``up`` path roots are searched.

        Example:
            {{#with a as |x|}}{{#with b}}{{../x.v}}{{/with}}{{/with}}
            ``x`` was pushed at level 1; ``../`` from level 2 reaches level 1.
        """
        level = len(self.path_roots) - up
        for frame, frame_level in zip(
            reversed(self.block_params), reversed(self.block_param_levels)
        ):
            if frame_level > level:
                continue
            param = frame.get(name)
            if param is not None:
                return param
        return None

    @contextmanager
    def block_context(self, params: BlockParams) -> Iterator[None]:
        self.push_block_context(params)
        try:
            yield
        finally:
            self.pop_block_context()

    # -- local variables ------------------------------------------------

    def promote_local_vars(self) -> None:
        """Open a save point; local assignments land in the new layer."""
        self.local_vars.append({})

    def demote_local_vars(self) -> None:
        """Discard the newest layer and everything assigned into it."""
        from stache.environment.exceptions import ScopeStackError

        if len(self.local_vars) <= 1:
            raise ScopeStackError(
                "demote_local_vars() without a matching promote_local_vars()",
                template_name=self.template_name,
            )
        self.local_vars.pop()

    def set_local_var(self, name: str, value: Any) -> None:
        self.local_vars[-1][name] = value

    def get_local_var(self, name: str, up: int = 0) -> Any:
        """Read a local variable ``up`` layers below the newest one."""
        index = len(self.local_vars) - 1 - up
        if index < 0:
            return MISSING
        return self.local_vars[index].get(name, MISSING)

    @contextmanager
    def local_vars_scope(self) -> Iterator[None]:
        """Sandbox local assignments; the layer is dropped on every exit path.

        Example:
            with rc.local_vars_scope():
                child = rc.derive()
                child.set_local_var("@index", 0)
                template.render(registry, ctx, child, out)
            # @index is gone here, even if render() raised
        """
        self.promote_local_vars()
        try:
            yield
        finally:
            self.demote_local_vars()

    # -- nesting --------------------------------------------------------

    @contextmanager
    def descend(
        self, template_name: str | None = None, source: str | None = None
    ) -> Iterator[None]:
        """Enter one nested sub-template render.

        Raises:
            RecursionLimitError: If ``depth`` would exceed ``max_depth``
        """
        from stache.environment.exceptions import RecursionLimitError

        if self.depth >= self.max_depth:
            raise RecursionLimitError(
                self.max_depth,
                template_name,
                template_name=self.template_name,
            )
        previous = (self.template_name, self.source)
        self.depth += 1
        if template_name is not None:
            self.template_name = template_name
        if source is not None:
            self.source = source
        try:
            yield
        finally:
            self.depth -= 1
            self.template_name, self.source = previous

    def derive(self) -> RenderContext:
        """Create a child context for a nested directive.

        The child gets its own copies of the path-root, block-param and
        local-variable stacks, so its pushes never show up in this context.
        The local-variable layers themselves are shared: a directive that
        promotes before deriving sees the child's assignments discarded
        when it demotes.
        """
        return RenderContext(
            path=self.path,
            path_roots=list(self.path_roots),
            block_params=list(self.block_params),
            block_param_levels=list(self.block_param_levels),
            current_value=self.current_value,
            local_vars=list(self.local_vars),
            depth=self.depth,
            max_depth=self.max_depth,
            template_name=self.template_name,
            source=self.source,
        )

    def depth_snapshot(self) -> ScopeDepth:
        return ScopeDepth(
            len(self.path_roots),
            len(self.block_params),
            len(self.local_vars),
            self.depth,
        )
