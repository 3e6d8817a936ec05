"""Line diffs between an existing output file and its fresh render."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from .context import GLOBAL_NS

CONTEXT_LINES = 3
RULE_WIDTH = 80


@dataclass(frozen=True)
class Change:
    """One inserted or deleted line. Indexes are zero-based."""

    tag: str  # "-" or "+"
    old_index: Optional[int]
    new_index: Optional[int]
    line: str


def diff_groups(old: str, new: str, context: int = CONTEXT_LINES) -> List[List[Change]]:
    """Return changed lines of ``old`` vs ``new`` grouped into hunks."""
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    groups: List[List[Change]] = []
    for opcodes in matcher.get_grouped_opcodes(context):
        group: List[Change] = []
        for tag, i1, i2, j1, j2 in opcodes:
            if tag == "equal":
                continue
            if tag in ("replace", "delete"):
                for i in range(i1, i2):
                    group.append(Change("-", i, None, old_lines[i]))
            if tag in ("replace", "insert"):
                for j in range(j1, j2):
                    group.append(Change("+", None, j, new_lines[j]))
        if group:
            groups.append(group)
    return groups


def _line_number(index: Optional[int]) -> str:
    return "    " if index is None else f"{index + 1:<4}"


def print_diff(console: Console, old: str, new: str) -> None:
    for idx, group in enumerate(diff_groups(old, new)):
        if idx > 0:
            console.print("-" * RULE_WIDTH)
        for change in group:
            style = "red" if change.tag == "-" else "green"
            text = Text(
                f"{_line_number(change.old_index)}{_line_number(change.new_index)} |"
            )
            text.append(change.tag, style=style)
            text.append(change.line.rstrip("\n"), style=style)
            console.print(text, soft_wrap=True)


def print_diff_header(
    console: Console, template: str, output: str, namespace: Optional[str]
) -> None:
    console.print("=" * RULE_WIDTH)
    console.print(f"|{' ' * 37}DIFF")
    console.print(f"| Template:  [bold]{escape(template)}[/bold]", soft_wrap=True)
    console.print(f"| Output:    [bold]{escape(output)}[/bold]", soft_wrap=True)
    console.print(f"| Namespace: [bold]{escape(namespace or GLOBAL_NS)}[/bold]", soft_wrap=True)
