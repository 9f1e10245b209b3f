"""Lexer for stache templates.

Splits template source into a flat token stream. Text between tags becomes
one ``DATA`` token; each tag becomes an opener token, the tokens of its
expression, and ``TAG_END``.

Tag forms:
    ==================  ===============================================
    ``{{expr}}``        escaped output
    ``{{{expr}}}``      raw output (also ``{{& expr}}``)
    ``{{#name ...}}``   block open
    ``{{^name ...}}``   inverted block open
    ``{{/name}}``       block close
    ``{{> name ...}}``  partial
    ``{{else ...}}``    else branch (also ``{{^}}``), may chain ``else if``
    ``{{! ...}}``       comment (``{{!-- ... --}}`` may contain ``}}``)
    ``{{{{name}}}}``    raw block, closed by ``{{{{/name}}}}``; the body is
                        kept as text, tags and all
    ==================  ===============================================

Whitespace control: ``~`` right after the opening braces strips whitespace
before the tag, ``~`` right before the closing braces strips whitespace
after it. A backslash before ``{{`` emits the braces literally.

Example:
    >>> [t.type.name for t in tokenize("Hi {{name}}")]
    ['DATA', 'VARIABLE_BEGIN', 'NAME', 'TAG_END', 'EOF']

"""

from __future__ import annotations

import re

from stache._types import Token, TokenType
from stache.environment.exceptions import TemplateSyntaxError

_OPEN = "{{"
_RAW_OPEN = "{{{{"
_RAW_CLOSE = "}}}}"

_EXPR_TOKEN = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<string>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')
    | (?P<number>-?\d+(?:\.\d+)?)(?![^\s()|=])
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<pipe>\|)
    | (?P<assign>=)
    | (?P<name>(?:\[[^\]]*\]|[^\s()|=\[\]"'])+)
    """,
    re.VERBOSE,
)

_COMMENT_END = re.compile(r"(~?)\}\}")
_LONG_COMMENT_END = re.compile(r"--(~?)\}\}")

_STRING_ESCAPES = re.compile(r"\\(.)")

_EXPR_TYPES = {
    "string": TokenType.STRING,
    "number": TokenType.NUMBER,
    "lparen": TokenType.LPAREN,
    "rparen": TokenType.RPAREN,
    "pipe": TokenType.PIPE,
    "assign": TokenType.ASSIGN,
    "name": TokenType.NAME,
}

_OPENERS = {
    "#": TokenType.BLOCK_BEGIN,
    "^": TokenType.INVERSE_BEGIN,
    "/": TokenType.CLOSE_BEGIN,
    ">": TokenType.PARTIAL_BEGIN,
    "&": TokenType.RAW_BEGIN,
}


class Lexer:
    """Tokenize one template source.

    Not reusable: create one Lexer per source.
    """

    def __init__(self, source: str, name: str | None = None) -> None:
        self.source = source
        self.name = name
        self._tokens: list[Token] = []
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", source)]
        # Text of the current DATA run, flushed when a tag starts
        self._data: list[str] = []
        self._data_pos = 0
        self._strip_next = False

    def tokenize(self) -> list[Token]:
        source = self.source
        pos = 0
        while True:
            start = source.find(_OPEN, pos)
            if start == -1:
                self._add_data(source[pos:], pos)
                break
            if start > 0 and source[start - 1] == "\\":
                # \{{ is literal text
                self._add_data(source[pos : start - 1], pos)
                self._add_data(_OPEN, start)
                pos = start + len(_OPEN)
                continue
            self._add_data(source[pos:start], pos)
            if source.startswith(_RAW_OPEN, start):
                pos = self._lex_raw_block(start)
            else:
                pos = self._lex_tag(start)
        self._flush_data()
        self._tokens.append(Token(TokenType.EOF, "", *self._position(len(source))))
        return self._tokens

    # -- positions and errors ------------------------------------------

    def _position(self, offset: int) -> tuple[int, int]:
        lo, hi = 0, len(self._line_starts) - 1
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if self._line_starts[mid] <= offset:
                lo = mid
            else:
                hi = mid - 1
        return lo + 1, offset - self._line_starts[lo]

    def _error(self, message: str, offset: int, suggestion: str | None = None) -> TemplateSyntaxError:
        lineno, col = self._position(offset)
        return TemplateSyntaxError(
            message,
            lineno=lineno,
            name=self.name,
            source=self.source,
            col_offset=col,
            suggestion=suggestion,
        )

    # -- data -----------------------------------------------------------

    def _add_data(self, text: str, offset: int) -> None:
        if not text:
            return
        if self._strip_next:
            stripped = text.lstrip()
            offset += len(text) - len(stripped)
            text = stripped
            if not text:
                return
            self._strip_next = False
        if not self._data:
            self._data_pos = offset
        self._data.append(text)

    def _flush_data(self, strip_trailing: bool = False) -> None:
        text = "".join(self._data)
        if strip_trailing:
            text = text.rstrip()
        if text:
            self._tokens.append(Token(TokenType.DATA, text, *self._position(self._data_pos)))
        self._data.clear()

    # -- tags -----------------------------------------------------------

    def _find_close(self, start: int, close: str) -> int:
        """Offset of ``close`` after ``start``, skipping quoted strings."""
        source = self.source
        i = start
        quote: str | None = None
        while i < len(source):
            ch = source[i]
            if quote:
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
            elif ch in "\"'":
                quote = ch
            elif source.startswith(close, i):
                return i
            i += 1
        return -1

    def _lex_tag(self, start: int) -> int:
        """Lex the tag at ``start``; return the offset just after it."""
        source = self.source
        pos = start + len(_OPEN)
        strip_before = source.startswith("~", pos)
        if strip_before:
            pos += 1

        if source.startswith("!", pos):
            closer = _LONG_COMMENT_END if source.startswith("!--", pos) else _COMMENT_END
            match = closer.search(source, pos)
            if match is None:
                raise self._error("Unclosed comment", start, "Close it with '}}'")
            if strip_before:
                self._flush_data(strip_trailing=True)
            self._strip_next = bool(match.group(1))
            return match.end()

        triple = source.startswith("{", pos)
        close = "}}}" if triple else "}}"
        if triple:
            pos += 1
        end = self._find_close(pos, close)
        if end == -1:
            raise self._error(
                "Unclosed tag",
                start,
                f"Add the closing '{close}'",
            )
        body_end = end
        strip_after = body_end > pos and source[body_end - 1] == "~"
        if strip_after:
            body_end -= 1

        self._flush_data(strip_trailing=strip_before)
        lineno, col = self._position(start)
        body = source[pos:body_end]

        if triple:
            self._tokens.append(Token(TokenType.RAW_BEGIN, "{", lineno, col))
            self._lex_expression(body, pos)
        else:
            self._lex_tag_body(body, pos, lineno, col)

        self._tokens.append(Token(TokenType.TAG_END, close, *self._position(end)))
        self._strip_next = strip_after
        return end + len(close)

    def _lex_raw_block(self, start: int) -> int:
        """Lex ``{{{{name args}}}}body{{{{/name}}}}``; the body stays one DATA token."""
        source = self.source
        head = start + len(_RAW_OPEN)
        head_end = source.find(_RAW_CLOSE, head)
        if head_end == -1:
            raise self._error("Unclosed raw block tag", start, f"Add the closing '{_RAW_CLOSE}'")
        head_text = source[head:head_end]
        words = head_text.split()
        if not words:
            raise self._error("Raw block without a name", start, "Write '{{{{raw}}}}'")
        name = words[0]
        closer = f"{_RAW_OPEN}/{name}{_RAW_CLOSE}"
        body_start = head_end + len(_RAW_CLOSE)
        close_start = source.find(closer, body_start)
        if close_start == -1:
            raise self._error(f"Unclosed raw block '{name}'", start, f"Close it with '{closer}'")

        self._flush_data()
        self._tokens.append(Token(TokenType.BLOCK_BEGIN, _RAW_OPEN, *self._position(start)))
        self._lex_expression(head_text, head)
        self._tokens.append(Token(TokenType.TAG_END, _RAW_CLOSE, *self._position(head_end)))
        if close_start > body_start:
            body = source[body_start:close_start]
            self._tokens.append(Token(TokenType.DATA, body, *self._position(body_start)))
        name_at = close_start + len(_RAW_OPEN) + 1
        self._tokens.append(Token(TokenType.CLOSE_BEGIN, "/", *self._position(close_start)))
        self._tokens.append(Token(TokenType.NAME, name, *self._position(name_at)))
        self._tokens.append(
            Token(TokenType.TAG_END, _RAW_CLOSE, *self._position(name_at + len(name)))
        )
        self._strip_next = False
        return close_start + len(closer)

    def _lex_tag_body(self, body: str, offset: int, lineno: int, col: int) -> None:
        stripped = body.lstrip()
        lead = len(body) - len(stripped)
        marker = stripped[:1]

        if marker == "^" and not stripped[1:].strip():
            self._tokens.append(Token(TokenType.ELSE, "^", lineno, col))
            return
        if marker in _OPENERS:
            self._tokens.append(Token(_OPENERS[marker], marker, lineno, col))
            self._lex_expression(stripped[1:], offset + lead + 1)
            return
        if stripped.startswith("else") and (len(stripped) == 4 or stripped[4].isspace()):
            self._tokens.append(Token(TokenType.ELSE, "else", lineno, col))
            self._lex_expression(stripped[4:], offset + lead + 4)
            return
        self._tokens.append(Token(TokenType.VARIABLE_BEGIN, "", lineno, col))
        self._lex_expression(body, offset)

    def _lex_expression(self, text: str, offset: int) -> None:
        pos = 0
        while pos < len(text):
            match = _EXPR_TOKEN.match(text, pos)
            if match is None:
                raise self._error(
                    f"Unexpected character {text[pos]!r} in tag",
                    offset + pos,
                )
            kind = match.lastgroup
            if kind != "ws":
                raw = match.group(kind)
                position = self._position(offset + pos)
                if kind == "string":
                    value: str | int | float = _STRING_ESCAPES.sub(r"\1", raw[1:-1])
                elif kind == "number":
                    value = float(raw) if "." in raw else int(raw)
                else:
                    value = raw
                self._tokens.append(Token(_EXPR_TYPES[kind], value, *position))
            pos = match.end()


def tokenize(source: str, name: str | None = None) -> list[Token]:
    """Tokenize template source.

    Raises:
        TemplateSyntaxError: On an unclosed tag or comment, or a character
            that cannot start any token
    """
    return Lexer(source, name).tokenize()
