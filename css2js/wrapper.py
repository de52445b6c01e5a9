"""Default style-injection wrapper and prefix/suffix assembly."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from css2js.config import ConvertConfig

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_TEMPLATE_PATH = TEMPLATES_DIR / "default_wrapper.js"

PLACEHOLDER = "$$$"


def split_wrapper_template(template: str, placeholder: str = PLACEHOLDER) -> tuple[str, str]:
    """Split a wrapper template into (prefix, suffix) at the first placeholder."""

    prefix, sep, suffix = template.partition(placeholder)
    if not sep:
        raise ValueError(f"wrapper template has no {placeholder!r} placeholder")
    return prefix, suffix


def load_wrapper_template(path: Path, placeholder: str = PLACEHOLDER) -> tuple[str, str]:
    # newline="" keeps the template bytes verbatim on every platform.
    with Path(path).open("r", encoding="utf-8", newline="") as f:
        return split_wrapper_template(f.read(), placeholder)


DEFAULT_PREFIX, DEFAULT_SUFFIX = load_wrapper_template(DEFAULT_TEMPLATE_PATH)


def wrap(body: str, config: ConvertConfig) -> str:
    return config.wrapper_prefix + body + config.wrapper_suffix
