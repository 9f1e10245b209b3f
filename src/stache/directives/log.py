"""The ``log`` directive: write to the ``stache.directives.log`` logger.

    {{log "rendering" user.name level="debug"}}

Parameters are rendered as text and joined with spaces. Levels: ``debug``,
``info`` (default), ``warn``/``warning``, ``error``. Produces no output.
Where the messages end up is the application's logging configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from stache.environment.exceptions import RenderError
from stache.values import render_value

if TYPE_CHECKING:
    from stache.context import Context
    from stache.directives.base import Directive
    from stache.environment.core import Registry
    from stache.render_context import RenderContext
    from stache.template.output import Output

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class LogDirective:
    __slots__ = ()

    def call(
        self,
        d: Directive,
        registry: Registry,
        ctx: Context,
        rc: RenderContext,
        out: Output,
    ) -> Any:
        level_name = str(d.hash_value("level", "info")).lower()
        level = _LEVELS.get(level_name)
        if level is None:
            raise RenderError(
                f"Unknown log level '{level_name}'",
                template_name=rc.template_name,
                directive=d.name,
                lineno=d.lineno or None,
                suggestion=f"Use one of: {', '.join(_LEVELS)}",
            )
        message = " ".join(render_value(p.value) for p in d.params)
        logger.log(level, message)
        return None


LOG_DIRECTIVE = LogDirective()
