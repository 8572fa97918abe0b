"""Package logging.

``setup_logger(function_name)`` returns a LoggerAdapter over the shared
``lowflow`` logger that tags every record with ``func_ctx``. Console output is
emoji-prefixed (colored on a TTY). A rotating file handler is added only when a
log file is passed or ``LOWFLOW_LOG_FILE`` is set.

Environment variables: LOWFLOW_LOG_LEVEL, LOWFLOW_LOG_FILE, NO_COLOR, NO_EMOJI.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import sys
from typing import Any

_DEFAULT_LOGGER_NAME = "lowflow"
_ROTATE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
_ROTATE_BACKUP_COUNT = 5

_LEVEL_EMOJIS: dict[int, str] = {
    logging.DEBUG: "🐞  ",
    logging.INFO: "ℹ️  ",
    logging.WARNING: "⚠️  ",
    logging.ERROR: "❌  ",
    logging.CRITICAL: "🚨  ",
}

_LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\x1b[38;5;244m",
    logging.INFO: "\x1b[38;5;39m",
    logging.WARNING: "\x1b[38;5;214m",
    logging.ERROR: "\x1b[38;5;196m",
    logging.CRITICAL: "\x1b[48;5;196;38;5;231m",
}
_RESET_COLOR = "\x1b[0m"


class EmojiFormatter(logging.Formatter):
    """Formatter adding the level emoji, the function context and optional color."""

    def __init__(self, *, use_color: bool = True, use_emoji: bool = True):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(func_ctx)s | %(emoji)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_color = use_color
        self.use_emoji = use_emoji

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "func_ctx"):
            record.func_ctx = "-"  # type: ignore[attr-defined]

        # logger.info("Years:", n) style calls: append the arguments
        if record.args:
            try:
                _ = record.msg % record.args
            except (TypeError, ValueError):
                record.msg = " ".join([str(record.msg), *(str(a) for a in record.args)])
                record.args = ()

        record.emoji = _LEVEL_EMOJIS.get(record.levelno, "") if self.use_emoji else ""
        message = super().format(record)

        if self.use_color and (color := _LEVEL_COLORS.get(record.levelno)):
            return f"{color}{message}{_RESET_COLOR}"
        return message


def _determine_log_level(explicit_level: int | str | None) -> int:
    if isinstance(explicit_level, int):
        return explicit_level
    level_str = str(explicit_level or os.getenv("LOWFLOW_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_str, logging.INFO)


def get_logger(
    name: str = _DEFAULT_LOGGER_NAME, *, level: int | str | None = None
) -> logging.Logger:
    """Return the shared logger, adding the console handler on first use.

    An explicit ``level`` is applied on every call; otherwise the level is set
    once from ``LOWFLOW_LOG_LEVEL`` (default INFO).
    """
    logger = logging.getLogger(name)

    if getattr(logger, "_lowflow_configured", False):
        if level is not None:
            logger.setLevel(_determine_log_level(level))
        return logger

    logger.setLevel(_determine_log_level(level))
    logger.propagate = False

    use_color = sys.stderr.isatty() and os.getenv("NO_COLOR") is None
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(
        EmojiFormatter(use_color=use_color, use_emoji=os.getenv("NO_EMOJI") is None)
    )
    logger.addHandler(stream_handler)

    logger._lowflow_configured = True  # type: ignore[attr-defined]
    return logger


class _FunctionContextAdapter(logging.LoggerAdapter):
    """Injects the bound function name as ``func_ctx``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs.setdefault("extra", {})["func_ctx"] = self.extra["func_ctx"]
        return msg, kwargs


def _attach_file_handler(base_logger: logging.Logger, log_file: str | Path) -> None:
    """Add a rotating file handler for ``log_file`` unless one is already attached."""
    path = Path(log_file).resolve()
    if any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == str(path)
        for h in base_logger.handlers
    ):
        return

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path,
            maxBytes=_ROTATE_MAX_BYTES,
            backupCount=_ROTATE_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        base_logger.exception("Could not open log file %s", path)
        return

    handler.setFormatter(EmojiFormatter(use_color=False, use_emoji=False))
    base_logger.addHandler(handler)


def setup_logger(
    function_name: str,
    *,
    level: int | str | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
    log_file: str | Path | None = None,
) -> logging.LoggerAdapter:
    """Return a logger adapter bound to ``function_name``.

    Args:
        function_name: Name shown in the ``func_ctx`` column.
        level: Optional log level override.
        logger_name: Base logger, shared package-wide by default.
        log_file: Log file path; overrides ``LOWFLOW_LOG_FILE``.

    Returns:
        LoggerAdapter injecting ``func_ctx`` into every record.
    """
    base_logger = get_logger(logger_name, level=level)

    effective_log_file = log_file or os.getenv("LOWFLOW_LOG_FILE")
    if effective_log_file:
        _attach_file_handler(base_logger, effective_log_file)

    return _FunctionContextAdapter(base_logger, {"func_ctx": function_name})


__all__ = ["EmojiFormatter", "get_logger", "setup_logger"]
