"""Parser error handling for stache.

Provides ParseError, a TemplateSyntaxError positioned at a token.
"""

from __future__ import annotations

from stache._types import Token
from stache.environment.exceptions import TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Syntax error raised by the parser at a specific token.

    Displays the offending source line with a caret under the token:

        ```
        Syntax Error: Mismatched close tag '{{/each}}', expected '{{/with}}'
          --> page.hbs:3:0
           |
          3 | {{/each}}
           | ^
        ```
    """

    def __init__(
        self,
        message: str,
        token: Token,
        source: str | None = None,
        filename: str | None = None,
        suggestion: str | None = None,
    ):
        self.token = token
        super().__init__(
            message,
            lineno=token.lineno,
            name=filename,
            source=source,
            col_offset=token.col_offset,
            suggestion=suggestion,
        )
