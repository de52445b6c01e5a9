from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from css2js.env import env_bool, env_str
from css2js.wrapper import DEFAULT_PREFIX, DEFAULT_SUFFIX

VERSION = "0.1.0"


@dataclass(frozen=True)
class ConvertConfig:
    # Break the output into `"..." +\n"..."` literals at every newline.
    split_on_newline: bool = True

    # Whitespace rules
    trim_spaces_before_newline: bool = True
    trim_trailing_newline: bool = True

    # None means the default style-injection wrapper; "" is a real (empty) override.
    prefix: str | None = None
    suffix: str | None = None

    @property
    def wrapper_prefix(self) -> str:
        return DEFAULT_PREFIX if self.prefix is None else self.prefix

    @property
    def wrapper_suffix(self) -> str:
        return DEFAULT_SUFFIX if self.suffix is None else self.suffix


def config_from_env(**overrides: Any) -> ConvertConfig:
    """Build a config from CSS2JS_* environment variables.

    Keyword overrides win over the environment; `None` overrides are ignored so
    callers can pass through optional CLI values unchanged.
    """

    cfg = ConvertConfig(
        split_on_newline=env_bool("CSS2JS_SPLIT_ON_NEWLINE", True),
        trim_spaces_before_newline=env_bool("CSS2JS_TRIM_SPACES_BEFORE_NEWLINE", True),
        trim_trailing_newline=env_bool("CSS2JS_TRIM_TRAILING_NEWLINE", True),
        prefix=env_str("CSS2JS_PREFIX"),
        suffix=env_str("CSS2JS_SUFFIX"),
    )
    changes = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **changes) if changes else cfg
