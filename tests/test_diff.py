from __future__ import annotations

import io

from rich.console import Console

from mold.diff import Change, diff_groups, print_diff, print_diff_header


def make_console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=120, color_system=None), buf


def test_identical_text_has_no_changes() -> None:
    assert diff_groups("a\nb\n", "a\nb\n") == []


def test_replaced_line_yields_delete_and_insert() -> None:
    (group,) = diff_groups("a\nb\nc\n", "a\nB\nc\n")
    assert group == [
        Change("-", 1, None, "b\n"),
        Change("+", None, 1, "B\n"),
    ]


def test_distant_changes_form_separate_groups() -> None:
    old = "".join(f"line {i}\n" for i in range(20))
    new = old.replace("line 1\n", "first\n").replace("line 18\n", "last\n")
    groups = diff_groups(old, new)
    assert len(groups) == 2
    assert groups[1][0] == Change("-", 18, None, "line 18\n")


def test_print_diff_shows_line_numbers_and_signs() -> None:
    console, buf = make_console()
    print_diff(console, "a\nb\n", "a\nc\nd\n")
    lines = buf.getvalue().splitlines()
    assert lines == [
        "2        |-b",
        "    2    |+c",
        "    3    |+d",
    ]


def test_print_diff_separates_groups_with_rule() -> None:
    old = "".join(f"line {i}\n" for i in range(20))
    new = old.replace("line 1\n", "first\n").replace("line 18\n", "last\n")
    console, buf = make_console()
    print_diff(console, old, new)
    assert "-" * 80 in buf.getvalue().splitlines()


def test_header_defaults_to_global_namespace() -> None:
    console, buf = make_console()
    print_diff_header(console, "in.tmpl", "[out].conf", None)
    out = buf.getvalue()
    assert "| Template:  in.tmpl" in out
    assert "| Output:    [out].conf" in out
    assert "| Namespace: GLOBAL" in out
