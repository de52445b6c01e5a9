from __future__ import annotations

import re

from css2js.config import ConvertConfig

_NEWLINE = "\n"

# After `_line_break_re` every line break is a bare "\n".
_line_break_re = re.compile(r"\r\n?")
_spaces_before_newline_re = re.compile(r"[\t ]+\n")

_ESCAPED_NEWLINE = "\\n"
_SPLIT_NEWLINE = '\\n" +\n"'


def escape_css(text: str, config: ConvertConfig) -> str:
    """Escape `text` as the body of a double-quoted JavaScript string.

    `text` is treated as the end of the input: a trailing newline run is
    trimmed (or its last newline inlined) according to `config`.
    """

    if not text:
        return ""

    # Backslashes first, so the ones added for quotes are not doubled.
    text = text.replace("\\", "\\\\")
    text = text.replace('"', '\\"')

    # Unix, DOS and classic Mac line endings all end up the same.
    if "\r" in text:
        text = _line_break_re.sub(_NEWLINE, text)

    if config.trim_spaces_before_newline:
        text = _spaces_before_newline_re.sub(_NEWLINE, text)

    if config.trim_trailing_newline:
        text = text.rstrip(_NEWLINE)
    elif text.endswith(_NEWLINE):
        # No dangling empty `""` piece after the last line when splitting.
        text = text[:-1] + _ESCAPED_NEWLINE

    if config.split_on_newline:
        return text.replace(_NEWLINE, _SPLIT_NEWLINE)
    return text.replace(_NEWLINE, _ESCAPED_NEWLINE)
