"""Ripple logging system.

Provides structured logging under the ``ripple`` hierarchy. Library modules
log through :func:`get_logger` and stay quiet unless asked: the default
level is WARNING, collision and table-building diagnostics are DEBUG.

Environment variables:
    RIPPLE_LOG_LEVEL:  DEBUG / INFO / WARNING (default) / ERROR
    RIPPLE_LOG_FILE:   optional path; appends plain-text log lines
"""

import logging
import os
import sys
import threading

_CONFIGURED = False
_LOCK = threading.Lock()

# ANSI colour codes (used only when stderr is a TTY)
_COLORS = {
    logging.DEBUG: "\033[36m",     # cyan
    logging.INFO: "\033[32m",      # green
    logging.WARNING: "\033[33m",   # yellow
    logging.ERROR: "\033[31m",     # red
    logging.CRITICAL: "\033[35m",  # magenta
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Adds ANSI colour to level names when writing to a TTY.

    The record is copied so other handlers see the plain level name.
    """

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color:
            record = logging.makeLogRecord(record.__dict__)
            color = _COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(record)


def _configure_once() -> None:
    """One-time lazy init of the ``ripple`` root logger."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    with _LOCK:
        if _CONFIGURED:
            return

        root = logging.getLogger("ripple")
        level_name = os.environ.get("RIPPLE_LOG_LEVEL", "WARNING").upper()
        root.setLevel(getattr(logging, level_name, logging.WARNING))

        fmt = "%(levelname)s %(name)s: %(message)s"
        use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_ColorFormatter(fmt, use_color=use_color))
        root.addHandler(console)

        log_file = os.environ.get("RIPPLE_LOG_FILE")
        if log_file:
            fh = logging.FileHandler(log_file, mode="a")
            fh.setFormatter(logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s: %(message)s"
            ))
            root.addHandler(fh)
        _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``ripple`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    _configure_once()
    return logging.getLogger(f"ripple.{name}")


def set_level(level) -> None:
    """Change the level of every ``ripple`` logger at runtime."""
    _configure_once()
    logging.getLogger("ripple").setLevel(level)
