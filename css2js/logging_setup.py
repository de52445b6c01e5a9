from __future__ import annotations

import logging
import os
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path

from css2js.env import env_truthy

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _log_level_from_env() -> str | None:
    raw = str(os.getenv("CSS2JS_LOG_LEVEL", "") or "").strip()
    return raw or None


def configure_console_logging(level: int | str = logging.WARNING) -> None:
    """Log to stderr for CLI runs. CSS2JS_LOG_LEVEL wins over `level`."""

    logging.basicConfig(level=level, format=_FORMAT, datefmt=_DATEFMT)
    lvl = _log_level_from_env()
    if lvl:
        with suppress(Exception):
            logging.getLogger().setLevel(lvl.upper())


def ensure_file_logging(*, log_dir: Path, filename: str = "css2js.log") -> Path:
    """Attach a rotating file handler to the root logger (idempotent).

    This works well with uvicorn's logging config (we just add another handler).
    """

    if env_truthy("CSS2JS_DISABLE_FILE_LOG"):
        return log_dir / filename

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (log_dir / filename).resolve()

    root = logging.getLogger()
    for h in root.handlers:
        if getattr(h, "_css2js_file_log", False):
            base = getattr(h, "baseFilename", None)
            return Path(str(base)).resolve() if base else log_file
        base = getattr(h, "baseFilename", None)
        if base and Path(str(base)).resolve() == log_file:
            return log_file

    handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler._css2js_file_log = True  # type: ignore[attr-defined]
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root.addHandler(handler)

    lvl = _log_level_from_env()
    if lvl:
        with suppress(Exception):
            root.setLevel(lvl.upper())

    return log_file
