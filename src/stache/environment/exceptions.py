"""Exceptions for the stache template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError          # Template not registered / not found by loader
├── TemplateSyntaxError            # Parse-time syntax error
└── RenderError                    # Render-time error with context
    ├── MissingParameterError      # Required positional parameter absent
    ├── PathNotFoundError          # Unresolved path (strict mode only)
    ├── ParameterRedefinitionError # Block param declared twice in one frame
    ├── RecursionLimitError        # Nested sub-template depth exceeded
    ├── DirectiveError             # Non-template failure inside a directive
    └── ScopeStackError            # Unbalanced push/pop (programming defect)

Error Messages:
Every exception carries an ``ErrorCode`` and renders a compact diagnostic
via ``format_compact()``:

    ```
    S-RUN-002: Path 'adr.city' not found in person.hbs:3
       |
    >  3 | {{adr.city}}
       |
      Hint: Did you mean 'addr'?
      Docs: docs/errors.md#s-run-002
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stache.environment import terminal

# Error reference shipped in the source tree; anchors are the lower-cased codes
_DOCS_BASE = "docs/errors.md"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: RUN (render time), TPL (template loading and parsing)
    """

    # Runtime errors (S-RUN-xxx)
    MISSING_PARAMETER = "S-RUN-001"
    PATH_NOT_FOUND = "S-RUN-002"
    PARAMETER_REDEFINITION = "S-RUN-003"
    RECURSION_LIMIT = "S-RUN-004"
    DIRECTIVE_FAILURE = "S-RUN-005"
    SCOPE_STACK = "S-RUN-006"
    RENDER_ERROR = "S-RUN-007"

    # Template loading errors (S-TPL-xxx)
    TEMPLATE_NOT_FOUND = "S-TPL-001"
    SYNTAX_ERROR = "S-TPL-002"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category ('runtime' or 'template')."""
        prefix = self.value.split("-")[1]
        return {"RUN": "runtime", "TPL": "template"}.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional 0-based column for the caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')}       {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet showing ``context_lines`` around ``error_line``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all stache template errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short terminal diagnostic with its docs URL."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts = [header]
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class TemplateNotFoundError(TemplateError):
    """Template is neither registered nor available from the loader.

    Example:
            >>> registry.render("nonexistent.hbs", {})
        TemplateNotFoundError: Template 'nonexistent.hbs' not found
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error in template source.

    When ``source`` and ``lineno`` are provided the message includes the
    offending line, and a caret when ``col_offset`` is known.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _location(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        return location

    def _snippet(self) -> str:
        if not (self.source and self.lineno):
            return ""
        lines = self.source.splitlines()
        if not 0 < self.lineno <= len(lines):
            return ""
        snippet = f"\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"
        if self.col_offset is not None:
            snippet += f"\n   | {' ' * self.col_offset}^"
        return snippet

    def _format_message(self) -> str:
        msg = f"Syntax Error: {self.message}\n  --> {self._location()}" + self._snippet()
        if self.suggestion:
            msg += f"\n  Suggestion: {self.suggestion}"
        return msg

    def format_compact(self) -> str:
        code_prefix = f"{self.code.value}: " if self.code else ""
        parts = [f"{code_prefix}{self.message}", f"  --> {self._location()}"]
        snippet = self._snippet()
        if snippet:
            parts.append(snippet.lstrip("\n") + "\n   |")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class RenderError(TemplateError):
    """Render-time error with debugging context.

    Output Format:
            ```
            Render Error: Parameter not found for directive 'with'
              Location: page.hbs
              Directive: with
              Suggestion: Pass the value to narrow to: {{#with person}}
            ```

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        directive: Name of the directive that failed, if any
        lineno: Line number in template source
        suggestion: Actionable fix suggestion
        source_snippet: Template lines around the failure
    """

    code: ErrorCode | None = ErrorCode.RENDER_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        directive: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.directive = directive
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        super().__init__(self._format_message())

    def _location(self) -> str | None:
        if not (self.template_name or self.lineno):
            return None
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Render Error: {self.message}"]
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.directive:
            parts.append(f"  Directive: {self.directive}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)

    def format_compact(self) -> str:
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message)
        ]
        loc = self._location()
        if loc:
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class MissingParameterError(RenderError):
    """A directive was invoked without a required positional parameter.

    Example:
            >>> registry.render_template("{{#with}}x{{/with}}", {})
        MissingParameterError: Parameter 0 not found for directive 'with'
    """

    code: ErrorCode | None = ErrorCode.MISSING_PARAMETER

    def __init__(self, directive: str, index: int = 0, **kwargs):
        self.index = index
        kwargs.setdefault(
            "suggestion", f"Pass a value to narrow to, e.g. {{{{#{directive} value}}}}"
        )
        super().__init__(
            f"Parameter {index} not found for directive '{directive}'",
            directive=directive,
            **kwargs,
        )


class PathNotFoundError(RenderError):
    """A path expression did not resolve while strict mode is on.

    If ``available_names`` is given, a "Did you mean?" suggestion is added
    when a close match exists (``difflib.get_close_matches``).
    """

    code: ErrorCode | None = ErrorCode.PATH_NOT_FOUND

    def __init__(
        self,
        path: str,
        *,
        available_names: frozenset[str] | None = None,
        **kwargs,
    ):
        self.path = path
        self._available_names = available_names
        kwargs.setdefault("suggestion", self._suggest())
        super().__init__(f"Path '{path}' not found", **kwargs)

    def _suggest(self) -> str:
        if self._available_names:
            from difflib import get_close_matches

            head = self.path.replace("/", ".").split(".")[0]
            matches = get_close_matches(head, self._available_names, n=1, cutoff=0.6)
            if matches:
                return f"Did you mean '{terminal.suggestion(matches[0])}'?"
        return "Check the data passed to render(), or disable strict_mode for optional values"


class ParameterRedefinitionError(RenderError):
    """The same block param name was declared twice in one frame.

    Example:
            >>> registry.render_template("{{#each items as |x x|}}{{/each}}", data)
        ParameterRedefinitionError: Block param 'x' is already defined
    """

    code: ErrorCode | None = ErrorCode.PARAMETER_REDEFINITION

    def __init__(self, name: str, **kwargs):
        self.name = name
        kwargs.setdefault("suggestion", "Give each block param a distinct name")
        super().__init__(f"Block param '{name}' is already defined", **kwargs)


class RecursionLimitError(RenderError):
    """Nested sub-template rendering exceeded the configured depth.

    Usually a partial that includes itself, directly or through others.
    """

    code: ErrorCode | None = ErrorCode.RECURSION_LIMIT

    def __init__(self, limit: int, entering: str | None = None, **kwargs):
        self.limit = limit
        self.entering = entering
        msg = f"Maximum render depth exceeded ({limit})"
        if entering:
            msg += f" when entering '{entering}'"
        kwargs.setdefault("suggestion", "Check for circular partials: A → B → A")
        super().__init__(msg, **kwargs)


class DirectiveError(RenderError):
    """A directive failed with a non-template exception.

    The original exception is chained as ``__cause__`` and kept on ``cause``.
    """

    code: ErrorCode | None = ErrorCode.DIRECTIVE_FAILURE

    def __init__(self, directive: str, cause: BaseException, **kwargs):
        self.cause = cause
        super().__init__(
            f"Directive '{directive}' failed: {type(cause).__name__}: {cause}",
            directive=directive,
            **kwargs,
        )


class ScopeStackError(RenderError):
    """Scope stack popped more often than pushed.

    Indicates a bug in a directive implementation, not in the template.
    """

    code: ErrorCode | None = ErrorCode.SCOPE_STACK
