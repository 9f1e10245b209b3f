"""Built-in directives and the directive contract.

``BUILTIN_DIRECTIVES`` seeds every Registry. Applications add their own
with ``Registry.register_helper``.
"""

from stache.directives.base import (
    Directive,
    DirectiveDef,
    FunctionDirective,
    PathAndValue,
    check_params_found,
    invoke,
)
from stache.directives.comparison import (
    AND_DIRECTIVE,
    EQ_DIRECTIVE,
    GT_DIRECTIVE,
    GTE_DIRECTIVE,
    LT_DIRECTIVE,
    LTE_DIRECTIVE,
    NE_DIRECTIVE,
    NOT_DIRECTIVE,
    OR_DIRECTIVE,
    CompareDirective,
    LogicDirective,
    NotDirective,
)
from stache.directives.control_flow import IF_DIRECTIVE, UNLESS_DIRECTIVE, IfDirective
from stache.directives.each import EACH_DIRECTIVE, EachDirective
from stache.directives.log import LOG_DIRECTIVE, LogDirective
from stache.directives.lookup import LOOKUP_DIRECTIVE, LookupDirective
from stache.directives.raw import RAW_DIRECTIVE, RawDirective
from stache.directives.with_block import WITH_DIRECTIVE, WithDirective

BUILTIN_DIRECTIVES: dict[str, DirectiveDef] = {
    "and": AND_DIRECTIVE,
    "each": EACH_DIRECTIVE,
    "eq": EQ_DIRECTIVE,
    "gt": GT_DIRECTIVE,
    "gte": GTE_DIRECTIVE,
    "if": IF_DIRECTIVE,
    "log": LOG_DIRECTIVE,
    "lookup": LOOKUP_DIRECTIVE,
    "lt": LT_DIRECTIVE,
    "lte": LTE_DIRECTIVE,
    "ne": NE_DIRECTIVE,
    "not": NOT_DIRECTIVE,
    "or": OR_DIRECTIVE,
    "raw": RAW_DIRECTIVE,
    "unless": UNLESS_DIRECTIVE,
    "with": WITH_DIRECTIVE,
}

__all__ = [
    "BUILTIN_DIRECTIVES",
    "CompareDirective",
    "Directive",
    "DirectiveDef",
    "EachDirective",
    "FunctionDirective",
    "IfDirective",
    "LogDirective",
    "LogicDirective",
    "LookupDirective",
    "NotDirective",
    "PathAndValue",
    "RawDirective",
    "WithDirective",
    "check_params_found",
    "invoke",
]
