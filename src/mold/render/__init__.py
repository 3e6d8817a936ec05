"""Rendering engine for mold."""

from ..utils.filesystem import filesystem_resolver
from .engine import FileResolver, Mold, Resolution

__all__ = ["FileResolver", "Mold", "Resolution", "filesystem_resolver"]
