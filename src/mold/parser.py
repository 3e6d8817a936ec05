"""Tokenizer for mold templates.

Template text is scanned left to right into three kinds of tokens:

- ``{% name %}`` variable references,
- ``{@ path @}`` and ``{@~ path ~@}`` file includes (the latter trims the
  included contents),
- literal text, which covers everything else including a lone ``{``.

Tokens do not copy text out of the template; they keep the source string
and index spans into it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from .errors import ParseError

VARIABLE_OPEN = "{%"
VARIABLE_CLOSE = "%}"
INCLUDE_OPEN = "{@"
INCLUDE_CLOSE = "@}"
TRIM_INCLUDE_OPEN = "{@~"
TRIM_INCLUDE_CLOSE = "~@}"

# Names may be empty; padding is plain spaces only.
_VARIABLE_RE = re.compile(r"\{%( *)([A-Za-z0-9.\-_!@$#]*)( *)%\}")


@dataclass(frozen=True)
class Literal:
    """Text copied to the output verbatim."""

    source: str = field(repr=False)
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.source[self.start : self.end]


@dataclass(frozen=True)
class VariableRef:
    """A ``{% name %}`` tag.

    ``start``/``end`` cover the whole tag including its delimiters and
    padding, ``name_start``/``name_end`` only the variable name.
    """

    source: str = field(repr=False)
    start: int
    end: int
    name_start: int
    name_end: int

    @property
    def name(self) -> str:
        return self.source[self.name_start : self.name_end]

    @property
    def raw(self) -> str:
        return self.source[self.start : self.end]


@dataclass(frozen=True)
class FileInclude:
    """A ``{@ path @}`` or ``{@~ path ~@}`` directive."""

    source: str = field(repr=False)
    start: int
    end: int
    path_start: int
    path_end: int
    trim: bool

    @property
    def path(self) -> str:
        return self.source[self.path_start : self.path_end]

    @property
    def raw(self) -> str:
        return self.source[self.start : self.end]


Token = Union[Literal, VariableRef, FileInclude]


def _strip_span(source: str, start: int, end: int) -> Tuple[int, int]:
    """Narrow ``start:end`` so it excludes surrounding whitespace."""
    while start < end and source[start].isspace():
        start += 1
    while end > start and source[end - 1].isspace():
        end -= 1
    return start, end


def _parse_variable(source: str, pos: int) -> VariableRef | None:
    match = _VARIABLE_RE.match(source, pos)
    if match is None:
        return None
    return VariableRef(
        source=source,
        start=pos,
        end=match.end(),
        name_start=match.start(2),
        name_end=match.end(2),
    )


def _parse_include(
    source: str, pos: int, opener: str, closer: str, trim: bool
) -> FileInclude | None:
    if not source.startswith(opener, pos):
        return None
    body_start = pos + len(opener)
    body_end = source.find(closer, body_start)
    if body_end == -1:
        raise ParseError(f"unterminated include directive, expected `{closer}`", pos)
    path_start, path_end = _strip_span(source, body_start, body_end)
    return FileInclude(
        source=source,
        start=pos,
        end=body_end + len(closer),
        path_start=path_start,
        path_end=path_end,
        trim=trim,
    )


def _parse_literal(source: str, pos: int) -> Literal:
    if source[pos] == "{":
        # Opening brace that starts no tag
        return Literal(source=source, start=pos, end=pos + 1)
    end = source.find("{", pos)
    if end == -1:
        end = len(source)
    return Literal(source=source, start=pos, end=end)


def _parse_token(source: str, pos: int) -> Token:
    if source[pos] == "{":
        token: Token | None = _parse_variable(source, pos)
        if token is None:
            token = _parse_include(
                source, pos, TRIM_INCLUDE_OPEN, TRIM_INCLUDE_CLOSE, trim=True
            )
        if token is None:
            token = _parse_include(
                source, pos, INCLUDE_OPEN, INCLUDE_CLOSE, trim=False
            )
        if token is not None:
            return token
    return _parse_literal(source, pos)


def parse(source: str) -> List[Token]:
    """Split ``source`` into tokens.

    Raises ParseError when an include directive has no closing delimiter.
    An unclosed ``{%`` is not an error, it is kept as literal text.
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        token = _parse_token(source, pos)
        tokens.append(token)
        pos = token.end
    return tokens
