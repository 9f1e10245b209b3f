"""stache Registry: templates, directives and render configuration.

The Registry is the entry point: it owns the registered templates, the
directive map (built-ins plus application helpers), and the render options
fixed at construction.

Example:
    >>> registry = Registry()
    >>> registry.register_template_string("greet", "Hello, {{name}}!")
    >>> registry.render("greet", {"name": "World"})
    'Hello, World!'

    >>> registry.register_helper("upper", lambda s: s.upper())
    >>> registry.render_template("{{upper name}}", {"name": "ada"})
    'ADA'

Configuration:
    strict_mode: Raise PathNotFoundError for paths that do not resolve
        (default False: they render empty)
    escape: Function applied to ``{{expr}}`` output (default html_escape)
    max_recursion_depth: Bound on nested sub-template renders (default 50)
    loader: Source of templates that were not registered explicitly

Thread-Safety:
    Template and directive maps are replaced, never mutated (copy-on-write),
    and parsed templates are immutable, so one Registry can serve concurrent
    renders. Register everything before sharing it across threads.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TextIO

from stache.context import Context
from stache.directives import BUILTIN_DIRECTIVES
from stache.directives.base import DirectiveDef
from stache.environment.exceptions import TemplateNotFoundError
from stache.environment.loaders import Loader
from stache.environment.registry import DirectiveRegistry, as_directive
from stache.parser import parse
from stache.render_context import DEFAULT_MAX_DEPTH, RenderContext
from stache.template import StreamOutput, StringOutput, Template
from stache.template.output import Output
from stache.utils.html import EscapeFn, html_escape

logger = logging.getLogger(__name__)


class Registry:
    """Central configuration and template registry.

    Attributes:
        strict_mode: Unresolved paths raise instead of rendering empty
        escape: Escape function for ``{{expr}}`` output
        max_recursion_depth: Limit on nested sub-template renders
        loader: Fallback source of templates
        helpers: Dict-like view of the directive map
    """

    def __init__(
        self,
        *,
        strict_mode: bool = False,
        escape: EscapeFn = html_escape,
        max_recursion_depth: int = DEFAULT_MAX_DEPTH,
        loader: Loader | None = None,
    ):
        if max_recursion_depth < 1:
            raise ValueError(f"max_recursion_depth must be at least 1, got {max_recursion_depth}")
        self._strict_mode = strict_mode
        self.escape = escape
        self.max_recursion_depth = max_recursion_depth
        self.loader = loader
        self._templates: dict[str, Template] = {}
        self._directives: dict[str, DirectiveDef] = dict(BUILTIN_DIRECTIVES)

    @property
    def strict_mode(self) -> bool:
        """Fixed at construction."""
        return self._strict_mode

    @property
    def helpers(self) -> DirectiveRegistry:
        return DirectiveRegistry(self)

    # =========================================================================
    # Templates
    # =========================================================================

    def register_template_string(self, name: str, source: str) -> None:
        """Parse ``source`` and register it under ``name``.

        Raises:
            TemplateSyntaxError: If the source does not parse
        """
        self.register_template(name, parse(source, name))

    def register_partial(self, name: str, source: str) -> None:
        """Register a partial. Partials are ordinary named templates."""
        self.register_template_string(name, source)

    def register_template(self, name: str, template: Template) -> None:
        new = self._templates.copy()
        new[name] = template
        self._templates = new
        logger.debug(f"Registered template '{name}'")

    def unregister_template(self, name: str) -> None:
        if name not in self._templates:
            return
        new = self._templates.copy()
        del new[name]
        self._templates = new
        logger.debug(f"Unregistered template '{name}'")

    def has_template(self, name: str) -> bool:
        return name in self._templates

    def get_template(self, name: str) -> Template:
        """Return the registered template, or parse one from the loader.

        Loader templates are parsed on every call and never stored.

        Raises:
            TemplateNotFoundError: If neither source has the template
            TemplateSyntaxError: If the loader's source does not parse
        """
        template = self._templates.get(name)
        if template is not None:
            return template
        if self.loader is None:
            raise self._not_found(name)
        source, filename = self.loader.get_source(name)
        logger.debug(f"Loaded template '{name}' from {filename or 'loader'}")
        return parse(source, name)

    def _not_found(self, name: str) -> TemplateNotFoundError:
        from difflib import get_close_matches

        msg = f"Template '{name}' not found"
        matches = get_close_matches(name, list(self._templates), n=1, cutoff=0.6)
        if matches:
            msg += f". Did you mean '{matches[0]}'?"
        return TemplateNotFoundError(msg)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Parse a template without registering it."""
        return parse(source, name)

    # =========================================================================
    # Directives
    # =========================================================================

    def register_helper(self, name: str, impl: DirectiveDef | Callable[..., Any]) -> None:
        """Register a directive, or a plain function as an inline directive.

        Replaces any directive of the same name, built-ins included.
        """
        new = self._directives.copy()
        new[name] = as_directive(impl)
        self._directives = new
        logger.debug(f"Registered directive '{name}'")

    def unregister_helper(self, name: str) -> None:
        if name not in self._directives:
            return
        new = self._directives.copy()
        del new[name]
        self._directives = new
        logger.debug(f"Unregistered directive '{name}'")

    def get_helper(self, name: str) -> DirectiveDef | None:
        return self._directives.get(name)

    # =========================================================================
    # Rendering
    # =========================================================================

    def _new_render_context(self) -> RenderContext:
        return RenderContext(max_depth=self.max_recursion_depth)

    def render(self, name: str, data: Any = None) -> str:
        """Render a registered (or loader-provided) template to a string."""
        out = StringOutput()
        self.render_with_context(name, Context.wraps(data), self._new_render_context(), out)
        return out.getvalue()

    def render_template(self, source: str, data: Any = None) -> str:
        """Parse and render ``source`` in one step."""
        template = parse(source)
        out = StringOutput()
        template.render(self, Context.wraps(data), self._new_render_context(), out)
        return out.getvalue()

    def render_to_write(self, name: str, data: Any, writer: TextIO | Output) -> None:
        """Render a template straight into ``writer``.

        ``writer`` is any object with ``write(str)``; output already written
        stays written if rendering fails part way.
        """
        out = writer if isinstance(writer, (StringOutput, StreamOutput)) else StreamOutput(writer)
        self.render_with_context(name, Context.wraps(data), self._new_render_context(), out)

    def render_with_context(
        self,
        name: str,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> None:
        """Render with caller-supplied root data, render context and sink."""
        self.get_template(name).render(self, ctx, rc, out)

    def __repr__(self) -> str:
        return (
            f"<Registry templates={len(self._templates)} "
            f"directives={len(self._directives)} strict_mode={self._strict_mode}>"
        )
