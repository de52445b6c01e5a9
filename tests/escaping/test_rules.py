from __future__ import annotations

from css2js.config import ConvertConfig
from css2js.escaping.rules import escape_css

RAW = ConvertConfig(split_on_newline=False, trim_spaces_before_newline=False, trim_trailing_newline=False)


def test_escape_css_escapes_quotes_and_backslashes_only() -> None:
    # Double quotes - yes; single quotes and tabs - no.
    assert escape_css('"', RAW) == '\\"'
    assert escape_css("'", RAW) == "'"
    assert escape_css("\t", RAW) == "\t"
    assert escape_css("\\", RAW) == "\\\\"


def test_escape_css_backslash_before_quote_is_not_double_escaped() -> None:
    assert escape_css('content: "\\"";', RAW) == 'content: \\"\\\\\\"\\";'


def test_escape_css_normalizes_all_line_endings() -> None:
    assert escape_css("\n \r\n \r", RAW) == "\\n \\n \\n"


def test_escape_css_reference_sequence() -> None:
    assert escape_css("\"'\n \r\n \r\t", RAW) == "\\\"'\\n \\n \\n\t"


def test_escape_css_trims_trailing_newline_by_default() -> None:
    assert escape_css("div { display: block }\n", ConvertConfig()) == "div { display: block }"


def test_escape_css_inlines_trailing_newline_when_not_trimming() -> None:
    cfg = ConvertConfig(trim_trailing_newline=False)
    assert escape_css("div { display: block }\n", cfg) == "div { display: block }\\n"


def test_escape_css_trims_whole_trailing_newline_run() -> None:
    assert escape_css("a {}\r\n\r\n\n", ConvertConfig()) == "a {}"


def test_escape_css_multiple_trailing_newlines_without_trimming() -> None:
    cfg = ConvertConfig(trim_trailing_newline=False)
    # Only the last newline is inlined; the others split like any other line.
    assert escape_css("a {}\n\n", cfg) == 'a {}\\n" +\n"\\n'


def test_escape_css_trims_spaces_before_newline() -> None:
    cfg = ConvertConfig(split_on_newline=False)
    assert escape_css("a, \t \ndiv { display: block }    \n", cfg) == "a,\\ndiv { display: block }"


def test_escape_css_keeps_spaces_before_newline_when_disabled() -> None:
    cfg = ConvertConfig(split_on_newline=False, trim_spaces_before_newline=False)
    assert escape_css("a, \t \ndiv { display: block }    \n", cfg) == "a, \t \\ndiv { display: block }    "


def test_escape_css_splits_on_newline() -> None:
    cfg = ConvertConfig(trim_trailing_newline=False)
    assert escape_css("line1 {}\nline2 {}", cfg) == 'line1 {}\\n" +\n"line2 {}'


def test_escape_css_split_avoids_empty_last_piece() -> None:
    cfg = ConvertConfig(trim_trailing_newline=False)
    text = "body { margin: 0 }\nh1 { padding-top: 10px }\n"
    assert escape_css(text, cfg) == 'body { margin: 0 }\\n" +\n"h1 { padding-top: 10px }\\n'


def test_escape_css_no_split_uses_inline_newlines() -> None:
    cfg = ConvertConfig(split_on_newline=False, trim_trailing_newline=False)
    text = "body { margin: 0 }\nh1 { padding-top: 10px }\n"
    assert escape_css(text, cfg) == "body { margin: 0 }\\nh1 { padding-top: 10px }\\n"


def test_escape_css_empty_and_newline_only_inputs() -> None:
    assert escape_css("", ConvertConfig()) == ""
    assert escape_css("\n\n", ConvertConfig()) == ""
    assert escape_css("\n", ConvertConfig(trim_trailing_newline=False)) == "\\n"
