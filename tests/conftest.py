from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the repo root (containing `css2js/`) is importable when pytest
# picks `tests/` as the rootdir (e.g., single-file runs).
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

_ENV_VARS = (
    "CSS2JS_SPLIT_ON_NEWLINE",
    "CSS2JS_TRIM_SPACES_BEFORE_NEWLINE",
    "CSS2JS_TRIM_TRAILING_NEWLINE",
    "CSS2JS_PREFIX",
    "CSS2JS_SUFFIX",
    "CSS2JS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Local shells may export CSS2JS_* settings; tests always start from defaults.
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CSS2JS_DISABLE_FILE_LOG", "1")
