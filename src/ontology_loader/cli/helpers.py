"""
CLI helper utilities.

This module provides shared utilities for CLI commands including:
- Logging setup (text or JSON, console and optional file)
- Configuration loading
- Console output helpers
"""

import json
import logging
import os
import sys
import tempfile
from datetime import datetime, timezone
from logging import Handler
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from ..constants import LoggingConfig
from ..core.config import LoaderConfiguration

# Type alias for log levels
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JSONFormatter(logging.Formatter):
    """A lightweight JSON formatter for structured logging."""

    _RESERVED_FIELDS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "process",
        "processName",
        "taskName",
        "message",
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            LoggingConfig.JSON_DATE_FORMAT
        )
        payload: Dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Include any extra fields supplied via extra=
        for key, value in record.__dict__.items():
            if key in self._RESERVED_FIELDS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


_MANAGED_HANDLERS: List[Handler] = []


def _clear_managed_handlers() -> None:
    """Remove handlers that were added by this module."""
    global _MANAGED_HANDLERS
    root_logger = logging.getLogger()
    for handler in _MANAGED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _MANAGED_HANDLERS = []


def setup_logging(
    level: str = LoggingConfig.DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    format_style: str = LoggingConfig.DEFAULT_FORMAT_STYLE,
) -> Optional[str]:
    """
    Setup logging on the root logger.

    Console output goes to stderr so stdout stays clean for reports. If the
    log file cannot be created, the system temp directory is tried before
    falling back to console only.

    Args:
        level: Log level name.
        log_file: Optional log file path.
        format_style: "text" or "json".

    Returns:
        The log file path actually used, or None if logging to console only.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    style = str(format_style).lower()
    if style not in LoggingConfig.SUPPORTED_FORMATS:
        style = LoggingConfig.DEFAULT_FORMAT_STYLE

    formatter: logging.Formatter
    if style == 'json':
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(fmt=LoggingConfig.LOG_FORMAT, datefmt=LoggingConfig.DATE_FORMAT)

    handlers: List[Handler] = []
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    actual_log_file = None
    if log_file:
        log_filename = os.path.basename(log_file) or "ontology_loader.log"
        for candidate in (log_file, os.path.join(tempfile.gettempdir(), log_filename)):
            try:
                log_dir = os.path.dirname(candidate)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(candidate, encoding='utf-8')
            except OSError as exc:
                print(f"  Could not create log at {candidate}: {exc}", file=sys.stderr)
                continue
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
            actual_log_file = candidate
            if candidate != log_file:
                print(f"Note: Using fallback log file: {candidate}", file=sys.stderr)
            break
        else:
            print("Warning: Could not write log file; logging to console only", file=sys.stderr)

    _clear_managed_handlers()
    root_logger = logging.getLogger()
    logging.captureWarnings(True)
    root_logger.setLevel(log_level)
    for handler in handlers:
        root_logger.addHandler(handler)
        _MANAGED_HANDLERS.append(handler)

    if actual_log_file:
        logging.getLogger(__name__).info(f"Logging to: {actual_log_file}")
    return actual_log_file


def load_configuration(config_path: Optional[str]) -> LoaderConfiguration:
    """
    Load loader options from a JSON file, or the defaults when no path is given.

    Raises:
        FileNotFoundError: If the configuration file doesn't exist.
        ValueError: If the file is not valid JSON or has invalid options.
    """
    if not config_path:
        return LoaderConfiguration()
    return LoaderConfiguration.from_file(config_path)


def load_logging_section(config_path: Optional[str]) -> Dict[str, Any]:
    """Return the optional "logging" section of a configuration file."""
    if not config_path or not Path(config_path).exists():
        return {}
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}
    section = data.get('logging', {}) if isinstance(data, dict) else {}
    return section if isinstance(section, dict) else {}


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with the given title."""
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_footer(width: int = 60) -> None:
    """Print a footer line."""
    print("=" * width + "\n")
