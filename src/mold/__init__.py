"""mold - render configuration files from templates and a layered context."""

from .context import GLOBAL_NS, Context, Namespace, load_context, loads_context
from .errors import (
    ContextError,
    IncludeReadError,
    MoldError,
    ParseError,
    RecursionLimitError,
    TemplateReadError,
)
from .parser import FileInclude, Literal, Token, VariableRef, parse
from .render import FileResolver, Mold, Resolution, filesystem_resolver

__all__ = [
    "GLOBAL_NS",
    "Context",
    "ContextError",
    "FileInclude",
    "FileResolver",
    "IncludeReadError",
    "Literal",
    "Mold",
    "MoldError",
    "Namespace",
    "ParseError",
    "RecursionLimitError",
    "Resolution",
    "TemplateReadError",
    "Token",
    "VariableRef",
    "filesystem_resolver",
    "load_context",
    "loads_context",
    "parse",
]
