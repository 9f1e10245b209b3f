"""stache environment: the Registry, loaders, and error types.

``exceptions`` is imported first: every other stache module raises from it.
"""

from stache.environment.exceptions import (
    DirectiveError,
    ErrorCode,
    MissingParameterError,
    ParameterRedefinitionError,
    PathNotFoundError,
    RecursionLimitError,
    RenderError,
    ScopeStackError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    build_source_snippet,
)
from stache.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, Loader
from stache.environment.core import Registry  # noqa: I001
from stache.environment.registry import DirectiveRegistry

__all__ = [
    "ChoiceLoader",
    "DictLoader",
    "DirectiveError",
    "DirectiveRegistry",
    "ErrorCode",
    "FileSystemLoader",
    "Loader",
    "MissingParameterError",
    "ParameterRedefinitionError",
    "PathNotFoundError",
    "RecursionLimitError",
    "Registry",
    "RenderError",
    "ScopeStackError",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "build_source_snippet",
]
