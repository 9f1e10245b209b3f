"""Template parser for stache.

Turns template source into an immutable Template tree of nodes.
"""

from stache.parser.core import Parser, parse
from stache.parser.errors import ParseError

__all__ = ["ParseError", "Parser", "parse"]
