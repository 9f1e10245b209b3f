"""Token types shared by the lexer and the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token produced by the lexer.

    Tag tokens open a ``{{ ... }}`` tag; the expression tokens of the tag
    follow, and ``TAG_END`` closes it.
    """

    DATA = "data"

    # Tag openers
    VARIABLE_BEGIN = "variable_begin"  # {{
    RAW_BEGIN = "raw_begin"  # {{{  {{&
    BLOCK_BEGIN = "block_begin"  # {{#  {{{{
    INVERSE_BEGIN = "inverse_begin"  # {{^name
    CLOSE_BEGIN = "close_begin"  # {{/  {{{{/
    PARTIAL_BEGIN = "partial_begin"  # {{>
    ELSE = "else"  # {{else  {{^}}
    TAG_END = "tag_end"  # }}  }}}  }}}}

    # Expression tokens
    NAME = "name"
    STRING = "string"
    NUMBER = "number"
    LPAREN = "lparen"
    RPAREN = "rparen"
    ASSIGN = "assign"
    PIPE = "pipe"

    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token with its source position.

    Attributes:
        type: Token kind
        value: Token text (decoded for strings and numbers)
        lineno: 1-based line number
        col_offset: 0-based column
    """

    type: TokenType
    value: str | int | float
    lineno: int
    col_offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
