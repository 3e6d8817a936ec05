"""Utility modules for mold."""

from .console import console, err_console
from .filesystem import filesystem_resolver, read_text, write_text

__all__ = ["console", "err_console", "filesystem_resolver", "read_text", "write_text"]
