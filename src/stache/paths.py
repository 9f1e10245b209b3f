"""Path expressions and their resolution against the render scope.

A path is written with ``.`` or ``/`` separators (``person.addr.city``,
``person/addr/city``), may climb enclosing scopes with leading ``../``, may
start at the data root with ``@root``, and may name a directive-local
variable with ``@`` (``@index``, ``@../key``). ``this`` and ``.`` stand for
the current context. ``[any text]`` quotes a segment that contains
separators or spaces.

Path strings:
    Every path root and the current path kept by ``RenderContext`` is a
    root-absolute path string: segments joined with ``/`` with the data root
    being ``""``. Segments that would not survive a round trip through
    ``split_path`` are written in brackets.

Resolution order (``resolve_path``):
    1. ``@root...`` walks the root data, ignoring every stack.
    2. ``@name`` reads a local variable, ``up`` layers below the top.
    3. After climbing ``up`` levels, a first segment naming a block param
       declared at or outside the level reached resolves through the param:
       ``ByPath`` substitutes its path, ``ByValue`` indexes into the
       captured value.
    4. Otherwise the base is the current path (no ``../``) or the path root
       reached by popping ``up`` levels off the path-root stack; base and
       segments are joined and walked from the root. With no ``../`` inside
       a scope narrowed to a computed value, the segments walk that value.

A miss yields ``MISSING``, never an exception; callers decide what a miss
means (strict mode, falsy branch, empty output).

"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NamedTuple

from stache.values import MISSING, is_sequence

if TYPE_CHECKING:
    from stache.render_context import RenderContext

_SEPARATORS = "./"
_CURRENT = frozenset({"this", "."})


@dataclass(frozen=True, slots=True)
class PathExpr:
    """Parsed path expression.

    Attributes:
        raw: Path text as written in the template
        segments: Name or index segments, ``this``/``.`` removed
        up: Number of leading ``../`` markers
        absolute: True for ``@root`` paths
        local: True for ``@name`` local variables (first segment is the name)
    """

    raw: str
    segments: tuple[str, ...] = ()
    up: int = 0
    absolute: bool = False
    local: bool = False

    @property
    def is_simple_name(self) -> bool:
        """True for a bare identifier such as ``lookup`` or ``name``."""
        return (
            len(self.segments) == 1
            and not (self.up or self.absolute or self.local)
            and self.raw == self.segments[0]
        )

    def __str__(self) -> str:
        return self.raw


class Resolved(NamedTuple):
    """Outcome of ``resolve_path``.

    ``path`` is None when the value did not come from a location in the data
    (local variables, ``ByValue`` block params). ``absolute`` tells whether
    ``path`` is root-absolute or relative to the current path.
    """

    value: Any
    path: str | None
    absolute: bool


def _split(text: str) -> list[tuple[str, bool]]:
    """Split path text into ``(segment, quoted)`` pairs."""
    parts: list[tuple[str, bool]] = []
    buf: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "[" and not buf:
            end = text.find("]", i + 1)
            if end == -1:
                raise ValueError(f"Unclosed '[' in path '{text}'")
            parts.append((text[i + 1 : end], True))
            i = end + 1
            continue
        if ch in _SEPARATORS:
            # '..' is a segment of its own, not two separators
            if ch == "." and not buf and text.startswith("..", i):
                parts.append(("..", False))
                i += 2
                continue
            if buf:
                parts.append(("".join(buf), False))
                buf.clear()
            i += 1
            continue
        buf.append(ch)
        i += 1
    if buf:
        parts.append(("".join(buf), False))
    return parts


def split_path(text: str) -> list[str]:
    """Split path text into raw segments.

    Example:
        >>> split_path("a.b/[c.d]")
        ['a', 'b', 'c.d']
    """
    return [seg for seg, _ in _split(text)]


def _quote(segment: str) -> str:
    if not segment or any(ch in segment for ch in "./[]") or segment in _CURRENT:
        return f"[{segment}]"
    return segment


def format_path(segments: list[str] | tuple[str, ...]) -> str:
    """Join raw segments into a path string, bracketing where needed."""
    return "/".join(_quote(seg) for seg in segments)


def _normalize(parts: list[tuple[str, bool]]) -> list[str]:
    out: list[str] = []
    for seg, quoted in parts:
        if quoted:
            out.append(seg)
        elif seg == "..":
            if out:
                out.pop()
        elif seg not in _CURRENT:
            out.append(seg)
    return out


def join_path(base: str, path: str) -> str:
    """Join a relative path string onto a base path string.

    Example:
        >>> join_path("people/0", "addr/city")
        'people/0/addr/city'
        >>> join_path("people/0", "this")
        'people/0'
    """
    return format_path(_normalize(_split(base) + _split(path)))


def child_path(base: str, segment: str | int) -> str:
    """Append one raw segment (an index or key) to a base path string."""
    return format_path([*split_path(base), str(segment)])


def parse_path(raw: str) -> PathExpr:
    """Parse path text into a PathExpr.

    Raises:
        ValueError: If the path is malformed (unclosed bracket, empty
            local name, ``..`` after the first segment, ``../`` with
            ``@root``)

    Example:
        >>> parse_path("../../d")
        PathExpr(raw='../../d', segments=('d',), up=2, absolute=False, local=False)
    """
    body = raw
    local = body.startswith("@")
    absolute = False
    if local:
        body = body[1:]

    up = 0
    while True:
        if body.startswith("../"):
            up += 1
            body = body[3:]
        elif body == "..":
            up += 1
            body = ""
        elif body.startswith("./"):
            body = body[2:]
        else:
            break

    parts = _split(body)
    # leading 'this' is a no-op: this.name == name
    if parts and not parts[0][1] and parts[0][0] in _CURRENT:
        parts = parts[1:]
    if any(seg == ".." and not quoted for seg, quoted in parts):
        raise ValueError(f"'..' is only allowed at the start of a path: '{raw}'")
    segments = [seg for seg, _ in parts]

    if local:
        if not segments:
            raise ValueError(f"Missing local variable name in '{raw}'")
        if segments[0] == "root":
            if up:
                raise ValueError(f"'@root' cannot be combined with '../' in '{raw}'")
            local = False
            absolute = True
            segments = segments[1:]

    return PathExpr(
        raw=raw,
        segments=tuple(segments),
        up=up,
        absolute=absolute,
        local=local,
    )


def get_segment(value: Any, segment: str) -> Any:
    """Index one segment into a value.

    Mappings are indexed by key (falling back to an integer key for numeric
    segments), sequences by non-negative position, other objects by public,
    non-callable attribute. Anything else is ``MISSING``.
    """
    if value is None or value is MISSING:
        return MISSING
    if isinstance(value, Mapping):
        if segment in value:
            return value[segment]
        if segment.isdigit() and int(segment) in value:
            return value[int(segment)]
        return MISSING
    if isinstance(value, (str, bytes, bytearray, bool, int, float)):
        return MISSING
    if is_sequence(value):
        if not segment.isdigit():
            return MISSING
        index = int(segment)
        return value[index] if index < len(value) else MISSING
    if segment.startswith("_"):
        return MISSING
    if dataclasses.is_dataclass(value):
        names = {f.name for f in dataclasses.fields(value)}
        return getattr(value, segment) if segment in names else MISSING
    attr = getattr(value, segment, MISSING)
    if callable(attr):
        return MISSING
    return attr


def walk(value: Any, segments: list[str] | tuple[str, ...]) -> Any:
    """Index a sequence of segments into ``value``; ``MISSING`` on any miss."""
    for seg in segments:
        value = get_segment(value, seg)
        if value is MISSING:
            return MISSING
    return value


def lookup_path(root: Any, path: str) -> Any:
    """Walk a root-absolute path string from the root data."""
    return walk(root, split_path(path))


def resolve_path(expr: PathExpr, rc: RenderContext, root: Any) -> Resolved:
    """Resolve a path expression in the current scope.

    Args:
        expr: Parsed path
        rc: Render context holding the scope stacks
        root: Root data of the render

    Returns:
        Resolved value (``MISSING`` when not found) and its path metadata
    """
    if expr.absolute:
        path = format_path(expr.segments)
        return Resolved(walk(root, expr.segments), path, True)

    if expr.local:
        name, rest = expr.segments[0], expr.segments[1:]
        value = rc.get_local_var(f"@{name}", expr.up)
        return Resolved(walk(value, rest), None, False)

    if expr.segments:
        ref = rc.get_block_param(expr.segments[0], expr.up)
        if ref is not None:
            rest = expr.segments[1:]
            if ref.path is not None:
                path = join_path(ref.path, format_path(rest))
                return Resolved(lookup_path(root, path), path, True)
            return Resolved(walk(ref.value, rest), None, False)

    if expr.up == 0:
        if rc.has_current_value():
            # below a computed value there is no data path to report
            return Resolved(walk(rc.current_value, expr.segments), None, False)
        relative = format_path(expr.segments)
        return Resolved(lookup_path(root, join_path(rc.get_path(), relative)), relative, False)

    path = join_path(rc.get_path_root(expr.up), format_path(expr.segments))
    return Resolved(lookup_path(root, path), path, True)
