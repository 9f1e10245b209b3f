"""stache Template: parsed template trees and output sinks."""

from stache.template.core import Template, evaluate_param
from stache.template.output import Output, StreamOutput, StringOutput

__all__ = ["Output", "StreamOutput", "StringOutput", "Template", "evaluate_param"]
