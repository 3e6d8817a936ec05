"""Exceptions raised by mold."""

from __future__ import annotations


class MoldError(Exception):
    """Base class for every error raised by mold"""


class ParseError(MoldError):
    """Raise when a file-include directive is never closed"""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} (at offset {offset})")
        self.offset = offset


class ContextError(MoldError):
    """Raise when the context document is malformed"""


class IncludeReadError(MoldError):
    """Raise when the contents of an included file cannot be read"""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(f"failed to read included file `{path}` - {reason}")
        self.path = path


class TemplateReadError(MoldError):
    """Raise when a template file cannot be read"""

    def __init__(self, path: str, reason: object) -> None:
        super().__init__(f"failed to read template `{path}` - {reason}")
        self.path = path


class RecursionLimitError(MoldError):
    """Raise when nested rendering goes deeper than the configured limit"""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(
            f"nested rendering exceeded the depth limit of {limit} (reached {depth});"
            " a variable or include probably references itself"
        )
        self.depth = depth
        self.limit = limit
