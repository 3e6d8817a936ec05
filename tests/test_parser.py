from __future__ import annotations

import pytest

from mold.errors import ParseError
from mold.parser import FileInclude, Literal, VariableRef, parse


def texts(source: str) -> list[str]:
    return [t.raw if not isinstance(t, Literal) else t.text for t in parse(source)]


def test_plain_text_is_a_single_literal() -> None:
    tokens = parse("just some text\nwith lines")
    assert len(tokens) == 1
    assert isinstance(tokens[0], Literal)
    assert tokens[0].text == "just some text\nwith lines"


def test_empty_input_has_no_tokens() -> None:
    assert parse("") == []


def test_variable_keeps_name_and_raw_tag() -> None:
    tokens = parse("a {%  y  %} b")
    assert [type(t) for t in tokens] == [Literal, VariableRef, Literal]
    var = tokens[1]
    assert isinstance(var, VariableRef)
    assert var.name == "y"
    assert var.raw == "{%  y  %}"


def test_variable_without_padding_and_special_chars() -> None:
    (var,) = parse("{%theme.bg-color_1!@$#%}")
    assert isinstance(var, VariableRef)
    assert var.name == "theme.bg-color_1!@$#"


def test_empty_variable_name_is_allowed() -> None:
    (var,) = parse("{% %}")
    assert isinstance(var, VariableRef)
    assert var.name == ""
    assert var.raw == "{% %}"


@pytest.mark.parametrize(
    "source",
    [
        "{% two words %}",
        "{%\tx %}",
        "{% x",
        "{% x }",
        "{% x/y %}",
    ],
)
def test_malformed_variable_tags_degrade_to_literal_text(source: str) -> None:
    tokens = parse(source)
    assert all(isinstance(t, Literal) for t in tokens)
    assert "".join(t.text for t in tokens) == source
    assert tokens[0].text == "{"


def test_lone_brace_is_its_own_literal() -> None:
    assert texts("a { b") == ["a ", "{", " b"]
    assert texts("{{% x %}") == ["{", "{% x %}"]


def test_plain_include_path_is_trimmed() -> None:
    (inc,) = parse("{@   ~/.config/colors.conf  @}")
    assert isinstance(inc, FileInclude)
    assert inc.path == "~/.config/colors.conf"
    assert inc.trim is False


def test_trimming_include() -> None:
    tokens = parse("x{@~ header.txt ~@}y")
    assert [type(t) for t in tokens] == [Literal, FileInclude, Literal]
    inc = tokens[1]
    assert isinstance(inc, FileInclude)
    assert inc.path == "header.txt"
    assert inc.trim is True
    assert inc.raw == "{@~ header.txt ~@}"


def test_include_closes_at_first_delimiter() -> None:
    tokens = parse("{@ a @}{@ b @}")
    assert [t.path for t in tokens if isinstance(t, FileInclude)] == ["a", "b"]


def test_unterminated_include_is_fatal() -> None:
    with pytest.raises(ParseError) as exc:
        parse("prefix {@ path with no end")
    assert exc.value.offset == 7


def test_unterminated_trimming_include_does_not_fall_back_to_plain() -> None:
    with pytest.raises(ParseError):
        parse("{@~ path @}")


def test_tokens_reference_the_source_buffer() -> None:
    source = "{% a %} and {@ f @}"
    for token in parse(source):
        assert token.source is source
    spans = [(t.start, t.end) for t in parse(source)]
    assert spans == [(0, 7), (7, 12), (12, 19)]
