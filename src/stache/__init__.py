"""stache: a logic-less template engine built on context-path scoping.

Quickstart:
    >>> from stache import Registry
    >>> registry = Registry()
    >>> registry.render_template("Hello, {{name}}!", {"name": "World"})
    'Hello, World!'

Narrowing:
    >>> data = {"person": {"name": "Ada", "addr": {"city": "London"}}}
    >>> registry.render_template(
    ...     "{{#with person.addr as |a|}}{{city}} ({{../person.name}}){{/with}}", data
    ... )
    'London (Ada)'

Architecture:
Template Source → Lexer → Parser → Template tree → render walk

Pipeline stages:
1. **Lexer**: Splits source into text and tag tokens
2. **Parser**: Builds an immutable tree of Data/Output/Block/Partial nodes
3. **Template**: Walks the tree against the root data; block directives
   narrow and restore a RenderContext as they are entered and left

Scoping:
Every narrowing directive (``with``, ``each``, sections, partials with a
context) pushes a path root, so ``../`` climbs exactly one directive per
step. ``as |name|`` binds names that stay visible to nested blocks, and
``@index``-style local variables live in layers discarded on exit.

Thread-Safety:
Parsed templates are immutable and the Registry uses copy-on-write maps;
each render call gets its own RenderContext.

"""

from stache.environment import (
    ChoiceLoader,
    DictLoader,
    DirectiveError,
    DirectiveRegistry,
    ErrorCode,
    FileSystemLoader,
    Loader,
    MissingParameterError,
    ParameterRedefinitionError,
    PathNotFoundError,
    RecursionLimitError,
    Registry,
    RenderError,
    ScopeStackError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    build_source_snippet,
)
from stache._types import Token, TokenType  # noqa: I001
from stache.context import Context
from stache.directives import Directive, DirectiveDef, FunctionDirective, PathAndValue
from stache.paths import PathExpr, parse_path
from stache.render_context import BlockParam, BlockParams, ByPath, ByValue, RenderContext
from stache.template import StreamOutput, StringOutput, Template
from stache.utils.html import html_escape, no_escape
from stache.values import MISSING, is_truthy

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "BlockParam",
    "BlockParams",
    "ByPath",
    "ByValue",
    "ChoiceLoader",
    "Context",
    "DictLoader",
    "Directive",
    "DirectiveDef",
    "DirectiveError",
    "DirectiveRegistry",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionDirective",
    "Loader",
    "MissingParameterError",
    "ParameterRedefinitionError",
    "PathAndValue",
    "PathExpr",
    "PathNotFoundError",
    "RecursionLimitError",
    "Registry",
    "RenderContext",
    "RenderError",
    "ScopeStackError",
    "SourceSnippet",
    "StreamOutput",
    "StringOutput",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "__version__",
    "build_source_snippet",
    "html_escape",
    "is_truthy",
    "no_escape",
    "parse_path",
]
