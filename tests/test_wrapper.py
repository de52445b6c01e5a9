from __future__ import annotations

from pathlib import Path

import pytest

from css2js.config import ConvertConfig
from css2js.wrapper import (
    DEFAULT_PREFIX,
    DEFAULT_SUFFIX,
    load_wrapper_template,
    split_wrapper_template,
    wrap,
)


def test_default_wrapper_is_the_style_injector() -> None:
    assert DEFAULT_PREFIX.startswith("(function (doc, cssText) {\n")
    assert 'doc.createElement("style")' in DEFAULT_PREFIX
    assert "styleEl.innerHTML = cssText;" in DEFAULT_PREFIX
    assert DEFAULT_PREFIX.endswith('}(document, "')
    assert DEFAULT_SUFFIX == '"));\n'
    assert "$$$" not in DEFAULT_PREFIX + DEFAULT_SUFFIX


def test_wrap_uses_defaults() -> None:
    assert wrap("a{}", ConvertConfig()) == DEFAULT_PREFIX + "a{}" + DEFAULT_SUFFIX


def test_wrap_custom_prefix_and_suffix_replace_defaults() -> None:
    cfg = ConvertConfig(prefix='var a = "', suffix='";')
    assert wrap("div { display: block }", cfg) == 'var a = "div { display: block }";'


def test_wrap_empty_overrides_are_respected() -> None:
    assert wrap("x", ConvertConfig(prefix="", suffix="")) == "x"
    assert wrap("x", ConvertConfig(prefix="")) == "x" + DEFAULT_SUFFIX


def test_split_wrapper_template_splits_at_first_placeholder() -> None:
    assert split_wrapper_template('inject("$$$");') == ('inject("', '");')
    assert split_wrapper_template("a$$$b$$$c") == ("a", "b$$$c")


def test_split_wrapper_template_requires_placeholder() -> None:
    with pytest.raises(ValueError):
        split_wrapper_template("no placeholder here")


def test_load_wrapper_template_keeps_line_endings(tmp_path: Path) -> None:
    p = tmp_path / "tpl.js"
    p.write_bytes(b'module.exports = "$$$";\r\n')
    assert load_wrapper_template(p) == ('module.exports = "', '";\r\n')
