"""Context store for mold."""

from .loader import (
    CONTEXT_ENV_VAR,
    default_context_path,
    discover_context_path,
    load_context,
    loads_context,
    parse_context_dict,
)
from .model import GLOBAL_NS, Context, Namespace

__all__ = [
    "CONTEXT_ENV_VAR",
    "GLOBAL_NS",
    "Context",
    "Namespace",
    "default_context_path",
    "discover_context_path",
    "load_context",
    "loads_context",
    "parse_context_dict",
]
