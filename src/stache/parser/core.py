"""Recursive-descent parser producing a Template tree.

Grammar (tokens from ``stache.lexer``)::

    body      := (DATA | output | block | partial)*
    output    := (VARIABLE_BEGIN | RAW_BEGIN) call TAG_END
    block     := (BLOCK_BEGIN | INVERSE_BEGIN) NAME arg* [as |NAME+|] TAG_END
                 body [ELSE [if-chain] TAG_END body]* CLOSE_BEGIN NAME TAG_END
    partial   := PARTIAL_BEGIN (NAME | STRING) [param] TAG_END
    call      := param | NAME arg+
    arg       := param | NAME ASSIGN param
    param     := STRING | NUMBER | NAME | LPAREN NAME arg* RPAREN

``{{else if x}}`` chains: the else branch becomes a sub-template holding a
single ``if`` block that shares the outer close tag.

"""

from __future__ import annotations

from stache._types import Token, TokenType
from stache.lexer import tokenize
from stache.nodes import Block, Call, Data, Expr, Literal, Node, Output, Partial, PathLookup
from stache.parser.errors import ParseError
from stache.paths import PathExpr, parse_path
from stache.template.core import Template

_LITERALS: dict[str, bool | None] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}

_BODY_END = frozenset({TokenType.ELSE, TokenType.CLOSE_BEGIN, TokenType.EOF})


class Parser:
    """Parse one token stream into a Template.

    Example:
        >>> from stache.lexer import tokenize
        >>> source = "{{#with person}}{{name}}{{/with}}"
        >>> Parser(tokenize(source), "page", source).parse()
        <Template 'page' (1 nodes)>
    """

    def __init__(self, tokens: list[Token], name: str | None = None, source: str | None = None):
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._source = source
        # Open blocks, innermost last, for unclosed-block diagnostics
        self._block_stack: list[tuple[str, Token]] = []

    def parse(self) -> Template:
        elements = self._parse_body()
        token = self._current
        if token.type == TokenType.ELSE:
            raise self._error(
                "'{{else}}' outside of a block",
                suggestion="Use {{else}} inside a block such as {{#if}}...{{else}}...{{/if}}",
            )
        if token.type == TokenType.CLOSE_BEGIN:
            name = self._peek(1).value
            raise self._error(f"Unexpected close tag '{{{{/{name}}}}}' with no open block")
        return Template(name=self._name, elements=tuple(elements), source=self._source)

    # -- token navigation ----------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        if self._current.type == token_type:
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, what: str | None = None) -> Token:
        if self._current.type != token_type:
            expected = what or token_type.value
            raise self._error(f"Expected {expected}, got {self._describe(self._current)}")
        return self._advance()

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            token=token or self._current,
            source=self._source,
            filename=self._name,
            suggestion=suggestion,
        )

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of template"
        if token.type == TokenType.TAG_END:
            return "end of tag"
        return f"{token.type.value} {token.value!r}"

    # -- body ----------------------------------------------------------

    def _parse_body(self) -> list[Node]:
        elements: list[Node] = []
        while self._current.type not in _BODY_END:
            token = self._current
            if token.type == TokenType.DATA:
                self._advance()
                elements.append(Data(token.lineno, token.col_offset, value=str(token.value)))
            elif token.type in (TokenType.VARIABLE_BEGIN, TokenType.RAW_BEGIN):
                elements.append(self._parse_output())
            elif token.type in (TokenType.BLOCK_BEGIN, TokenType.INVERSE_BEGIN):
                elements.append(self._parse_block())
            elif token.type == TokenType.PARTIAL_BEGIN:
                elements.append(self._parse_partial())
            else:
                raise self._error(f"Unexpected {self._describe(token)}")
        return elements

    def _sub_template(self, elements: list[Node]) -> Template:
        return Template(name=self._name, elements=tuple(elements))

    # -- tags ----------------------------------------------------------

    def _parse_output(self) -> Output:
        start = self._advance()
        if self._current.type == TokenType.TAG_END:
            raise self._error("Empty tag", start)
        expr = self._parse_call_or_param()
        self._expect(TokenType.TAG_END, "'}}'")
        return Output(
            start.lineno,
            start.col_offset,
            expr=expr,
            escape=start.type == TokenType.VARIABLE_BEGIN,
        )

    def _parse_call_or_param(self) -> Expr:
        """``name arg+`` is a call; a lone token is a plain parameter."""
        token = self._current
        nxt = self._peek(1)
        if token.type == TokenType.NAME and nxt.type not in (TokenType.TAG_END, TokenType.EOF):
            self._advance()
            params, hash_ = self._parse_args(stop=TokenType.TAG_END)
            return Call(token.lineno, token.col_offset, name=str(token.value), params=params, hash=hash_)
        return self._parse_param()

    def _parse_block(self) -> Block:
        start = self._advance()
        inverted = start.type == TokenType.INVERSE_BEGIN
        name_token = self._expect(TokenType.NAME, "block name")
        name = str(name_token.value)
        self._check_path(name, name_token)
        self._block_stack.append((name, start))

        params, hash_ = self._parse_args(stop=TokenType.TAG_END, allow_block_params=True)
        block_params = self._parse_block_params()
        self._expect(TokenType.TAG_END, "'}}'")

        main = self._parse_body()
        inverse = self._parse_else_chain(name)
        self._parse_close(name)
        self._block_stack.pop()

        template: Template | None = self._sub_template(main)
        if inverted:
            template, inverse = inverse, template
        return Block(
            start.lineno,
            start.col_offset,
            name=name,
            params=params,
            hash=hash_,
            block_params=block_params,
            template=template,
            inverse=inverse,
        )

    def _parse_else_chain(self, name: str) -> Template | None:
        """Parse ``{{else}}`` or ``{{else if ...}}`` up to the close tag."""
        if self._current.type != TokenType.ELSE:
            return None
        else_token = self._advance()
        if self._match(TokenType.TAG_END):
            return self._sub_template(self._parse_body())

        # {{else if cond}}: a nested block sharing our close tag
        head = self._expect(TokenType.NAME, "directive name after 'else'")
        params, hash_ = self._parse_args(stop=TokenType.TAG_END, allow_block_params=True)
        block_params = self._parse_block_params()
        self._expect(TokenType.TAG_END, "'}}'")
        main = self._parse_body()
        inverse = self._parse_else_chain(name)
        chained = Block(
            else_token.lineno,
            else_token.col_offset,
            name=str(head.value),
            params=params,
            hash=hash_,
            block_params=block_params,
            template=self._sub_template(main),
            inverse=inverse,
        )
        return self._sub_template([chained])

    def _parse_close(self, name: str) -> None:
        token = self._current
        if token.type == TokenType.EOF:
            _, opened = self._block_stack[-1]
            raise self._error(
                f"Unclosed block '{name}'",
                opened,
                suggestion=f"Add '{{{{/{name}}}}}' to close it",
            )
        self._expect(TokenType.CLOSE_BEGIN, f"'{{{{/{name}}}}}'")
        close = self._expect(TokenType.NAME, "block name")
        if close.value != name:
            raise self._error(
                f"Mismatched close tag '{{{{/{close.value}}}}}', expected '{{{{/{name}}}}}'",
                close,
            )
        self._expect(TokenType.TAG_END, "'}}'")

    def _parse_partial(self) -> Partial:
        start = self._advance()
        token = self._current
        if token.type not in (TokenType.NAME, TokenType.STRING):
            raise self._error("Expected partial name", token)
        self._advance()
        context: Expr | None = None
        if self._current.type != TokenType.TAG_END:
            if self._peek(1).type == TokenType.ASSIGN:
                raise self._error(
                    "Hash parameters are not supported on partials",
                    suggestion="Narrow with a context parameter: {{> card person}}",
                )
            context = self._parse_param()
        if self._current.type != TokenType.TAG_END:
            raise self._error(
                "Partials take at most one context parameter",
                suggestion="Narrow with a single parameter: {{> card person}}",
            )
        self._advance()
        return Partial(start.lineno, start.col_offset, name=str(token.value), context=context)

    # -- expressions ---------------------------------------------------

    def _parse_args(
        self,
        stop: TokenType,
        allow_block_params: bool = False,
    ) -> tuple[tuple[Expr, ...], tuple[tuple[str, Expr], ...]]:
        params: list[Expr] = []
        hash_: list[tuple[str, Expr]] = []
        while self._current.type not in (stop, TokenType.TAG_END, TokenType.EOF):
            token = self._current
            if (
                allow_block_params
                and token.type == TokenType.NAME
                and token.value == "as"
                and self._peek(1).type == TokenType.PIPE
            ):
                break
            if token.type == TokenType.NAME and self._peek(1).type == TokenType.ASSIGN:
                self._advance()
                self._advance()
                hash_.append((str(token.value), self._parse_param()))
                continue
            if hash_:
                raise self._error(
                    "Positional parameter after hash parameter",
                    suggestion="Put positional parameters before key=value pairs",
                )
            params.append(self._parse_param())
        return tuple(params), tuple(hash_)

    def _parse_block_params(self) -> tuple[str, ...]:
        if not (self._current.type == TokenType.NAME and self._current.value == "as"):
            return ()
        self._advance()
        self._expect(TokenType.PIPE, "'|'")
        names: list[str] = []
        while self._current.type == TokenType.NAME:
            names.append(str(self._advance().value))
        if not names:
            raise self._error("Expected block param name", suggestion="Write 'as |item|'")
        self._expect(TokenType.PIPE, "closing '|'")
        return tuple(names)

    def _parse_param(self) -> Expr:
        token = self._current
        if token.type in (TokenType.STRING, TokenType.NUMBER):
            self._advance()
            return Literal(token.lineno, token.col_offset, value=token.value)
        if token.type == TokenType.NAME:
            self._advance()
            text = str(token.value)
            if text in _LITERALS:
                return Literal(token.lineno, token.col_offset, value=_LITERALS[text])
            return PathLookup(token.lineno, token.col_offset, path=self._check_path(text, token))
        if token.type == TokenType.LPAREN:
            self._advance()
            head = self._expect(TokenType.NAME, "directive name")
            params, hash_ = self._parse_args(stop=TokenType.RPAREN)
            self._expect(TokenType.RPAREN, "')'")
            return Call(token.lineno, token.col_offset, name=str(head.value), params=params, hash=hash_)
        raise self._error(f"Unexpected {self._describe(token)}")

    def _check_path(self, text: str, token: Token) -> PathExpr:
        try:
            return parse_path(text)
        except ValueError as e:
            raise self._error(str(e), token) from e


def parse(source: str, name: str | None = None) -> Template:
    """Tokenize and parse template source.

    Raises:
        TemplateSyntaxError: If the source is not a valid template
    """
    return Parser(tokenize(source, name), name, source).parse()
