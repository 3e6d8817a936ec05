"""Recursive rendering of mold templates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..context import GLOBAL_NS, Context
from ..errors import (
    IncludeReadError,
    MoldError,
    ParseError,
    RecursionLimitError,
    TemplateReadError,
)
from ..parser import FileInclude, Literal, VariableRef, parse
from ..utils.filesystem import filesystem_resolver

logger = logging.getLogger(__name__)

FileResolver = Callable[[str], str]


@dataclass(frozen=True)
class Resolution:
    """Result of re-rendering a variable value.

    When the value itself fails to render, ``text`` is the raw value and
    ``error`` holds the reason.
    """

    text: str
    error: Optional[MoldError] = None

    @property
    def fell_back(self) -> bool:
        return self.error is not None


class Mold:
    """Renders template text against a Context.

    ``resolver`` returns the text of a file given its path and is used for
    include directives and by ``render_file``. ``max_depth`` bounds nested
    renders; with None a value that references itself recurses until the
    interpreter raises RecursionError.
    """

    def __init__(
        self,
        resolver: Optional[FileResolver] = None,
        max_depth: Optional[int] = None,
    ) -> None:
        if max_depth is not None and max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.resolver: FileResolver = resolver or filesystem_resolver()
        self.max_depth = max_depth

    def render(
        self,
        input: str,
        context: Context,
        namespace: Optional[str] = None,
        render_raw: bool = False,
    ) -> str:
        """Render ``input``.

        Variables are looked up in ``namespace`` first and then in the global
        namespace. Missing variables render as their original tag when
        ``render_raw`` is set and as nothing otherwise.

        Raises ParseError for an unterminated include directive and
        IncludeReadError when an included file cannot be read.
        """
        logger.debug("Using namespace %s", namespace or GLOBAL_NS)
        return self._render(input, context, namespace, render_raw, depth=0)

    def render_file(
        self,
        file: Union[str, Path],
        context: Context,
        namespace: Optional[str] = None,
        render_raw: bool = False,
    ) -> str:
        """Read ``file`` through the resolver and render its contents."""
        try:
            input = self.resolver(str(file))
        except Exception as e:
            raise TemplateReadError(str(file), e) from e
        return self.render(input, context, namespace, render_raw)

    def _render(
        self,
        input: str,
        context: Context,
        namespace: Optional[str],
        render_raw: bool,
        depth: int,
    ) -> str:
        out: List[str] = []
        for token in parse(input):
            if isinstance(token, Literal):
                out.append(token.text)
            elif isinstance(token, VariableRef):
                value = context.get_variable_value(token.name, namespace)
                if value is not None:
                    resolution = self._render_value(
                        value, context, namespace, render_raw, depth + 1
                    )
                    if resolution.fell_back:
                        logger.warning(
                            "Using raw value of %s, it failed to render: %s",
                            token.name,
                            resolution.error,
                        )
                    out.append(resolution.text)
                elif render_raw:
                    out.append(token.raw)
            elif isinstance(token, FileInclude):
                out.append(
                    self._render_include(
                        token, context, namespace, render_raw, depth + 1
                    )
                )
            else:
                raise TypeError(f"unexpected token {token!r}")
        return "".join(out)

    def _check_depth(self, depth: int) -> None:
        if self.max_depth is not None and depth > self.max_depth:
            raise RecursionLimitError(depth, self.max_depth)

    def _render_value(
        self,
        value: str,
        context: Context,
        namespace: Optional[str],
        render_raw: bool,
        depth: int,
    ) -> Resolution:
        # Values may contain tags of their own.
        self._check_depth(depth)
        try:
            return Resolution(self._render(value, context, namespace, render_raw, depth))
        except (ParseError, IncludeReadError) as e:
            return Resolution(text=value, error=e)

    def _render_include(
        self,
        token: FileInclude,
        context: Context,
        namespace: Optional[str],
        render_raw: bool,
        depth: int,
    ) -> str:
        self._check_depth(depth)
        logger.debug("Including %s (trim=%s)", token.path, token.trim)
        try:
            contents = self.resolver(token.path)
        except RecursionError:
            raise
        except Exception as e:
            raise IncludeReadError(token.path, e) from e
        if token.trim:
            contents = contents.strip()
        return self._render(contents, context, namespace, render_raw, depth)
