#!/usr/bin/env python3
"""
🔍 Centralized Logging System for PrayLine
The rendered statusline is written to stdout, so every handler here writes to
stderr or to a file. Quiet by default; raise the level with
PRAYLINE_LOG_LEVEL when debugging.
"""

import json
import logging
import logging.handlers
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

DEFAULT_LOG_LEVEL = logging.WARNING
MAX_LOG_SIZE = 1 * 1024 * 1024
BACKUP_COUNT = 2


def _log_level() -> int:
    level = os.getenv('PRAYLINE_LOG_LEVEL')
    if level:
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    return DEFAULT_LOG_LEVEL


def _json_logs_enabled() -> bool:
    return os.getenv('PRAYLINE_JSON_LOGS', '0') == '1'


def _file_logging_enabled() -> bool:
    return os.getenv('PRAYLINE_FORCE_FILE_LOG') == '1'


def _get_app_log_dir() -> Path:
    """Get application log directory path-agnostically"""
    env_log_dir = os.getenv('PRAYLINE_LOG_DIR')
    if env_log_dir:
        return Path(env_log_dir)
    return Path.home() / ".prayline" / "logs"


_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'no_color',
})


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, 'no_color', False):
            return super().format(record)

        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        original = record.levelname
        record.levelname = f"{color}{original}{reset}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """Structured JSON formatter.

    Example output:
        {"level": "WARNING", "logger": "prayline.scheduler",
         "message": "Discarding timings response for Vienna:Austria:3: malformed",
         "timestamp": "2026-10-17T10:30:00.123000Z"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_data['source'] = f"{record.filename}:{record.lineno}"
            log_data['function'] = record.funcName

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Fields passed via logger.info("msg", extra={...})
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_data:
                continue
            try:
                json.dumps(value)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, ensure_ascii=True, sort_keys=True)


def _plain_formatter() -> logging.Formatter:
    return logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(filename)s:%(lineno)d | %(message)s'
    )


def setup_logger(name: str = "prayline") -> logging.Logger:
    """
    Sets up a logger with stderr (and optionally file) handlers.

    Loggers named ``prayline.<module>`` propagate to the ``prayline`` logger,
    so configuring it once covers the whole package.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers if logger already exists
    if logger.handlers:
        return logger

    level = _log_level()
    json_logs = _json_logs_enabled()
    logger.setLevel(level)

    console_handler = logging.StreamHandler()  # stderr
    console_handler.setLevel(level)
    console_handler.setFormatter(JSONFormatter() if json_logs else ColoredFormatter(
        '%(levelname)s %(name)s: %(message)s'
    ))
    logger.addHandler(console_handler)

    if _file_logging_enabled():
        log_dir = _get_app_log_dir()
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / "prayline.log",
                maxBytes=MAX_LOG_SIZE,
                backupCount=BACKUP_COUNT,
                encoding='utf-8'
            )
        except OSError as exc:
            logger.warning("File logging disabled: %s", exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter() if json_logs else _plain_formatter())
            logger.addHandler(file_handler)

    return logger


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log a message with structured context fields.

    In JSON mode, context fields appear as separate JSON keys. Otherwise
    they're appended to the message as key=value pairs.

    Example:
        >>> log_structured(logger, logging.INFO, "Next prayer computed",
        ...                prayer="Asr", remaining="10m")
    """
    if _json_logs_enabled():
        logger.log(level, message, extra=context)
    elif context:
        context_str = " ".join(f"{k}={v}" for k, v in context.items())
        logger.log(level, f"{message} | {context_str}")
    else:
        logger.log(level, message)


def log_exception(logger: logging.Logger, exc_info: bool = True) -> None:
    """Log an exception with full traceback."""
    logger.exception("❌ Unhandled exception occurred:", exc_info=exc_info)


__all__ = ["ColoredFormatter", "JSONFormatter", "log_exception", "log_structured", "setup_logger"]
