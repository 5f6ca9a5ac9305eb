"""Process configuration read from the environment."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_VAR = "MONKEY_LOG_LEVEL"
PY_TRACE_VAR = "MONKEY_DEBUG_PY_TRACE"

_TRUTHY = ("1", "true", "yes", "on")


def log_level() -> int:
    """Level named by MONKEY_LOG_LEVEL; unknown names fall back to WARNING."""
    name = os.environ.get(LOG_LEVEL_VAR, "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def debug_py_trace_enabled() -> bool:
    return os.environ.get(PY_TRACE_VAR, "").strip().lower() in _TRUTHY


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[PY_TRACE_VAR] = "1"
    else:
        os.environ.pop(PY_TRACE_VAR, None)


def configure_logging() -> logging.Logger:
    """Attach a stderr handler to the package logger once; used by the CLI and REPL."""
    pkg_logger = logging.getLogger("monkey")
    pkg_logger.setLevel(log_level())

    if not any(getattr(h, "_monkey_cli", False) for h in pkg_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        handler._monkey_cli = True  # type: ignore[attr-defined]
        pkg_logger.addHandler(handler)

    return pkg_logger
