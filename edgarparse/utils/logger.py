"""
Logging setup for edgarparse.

Provides structured JSON logging and standard logging configuration.
"""

import json
import logging
import logging.config
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from .config import get_config

CONSOLE_HANDLER = "edgarparse.console"
FILE_HANDLER = "edgarparse.file"


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs log records as JSON objects for easy parsing and analysis.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds context to log messages.

    Allows adding extra fields to log records for structured logging.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        """Process log message and add extra context."""
        extra = kwargs.get("extra", {})
        extra.update(self.extra)

        # Store extra fields for JsonFormatter
        if "extra_fields" not in extra:
            extra["extra_fields"] = {}
        extra["extra_fields"].update(self.extra)

        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Set up logging configuration.

    Args:
        config_path: Path to logging config YAML file.
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    config = get_config()

    if config_path is None:
        path = config.config_dir / "logging.yaml"
    else:
        path = Path(config_path)
        if not path.is_absolute():
            path = config.config_dir / path

    if path.exists():
        with open(path, "r") as f:
            dict_config = yaml.safe_load(f)
        logging.config.dictConfig(dict_config)
    else:
        _setup_basic_logging(
            log_level or config.settings.logging.level,
            config.settings.logging.log_path,
            config.settings.logging.max_log_files,
        )

    if log_level:
        logging.getLogger().setLevel(getattr(logging, log_level.upper()))


def _setup_basic_logging(level: str, log_path: Optional[str], backup_count: int) -> None:
    """Set up basic logging configuration as fallback."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Re-running setup replaces our handlers instead of stacking them
    for handler in list(root_logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name(CONSOLE_HANDLER)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root_logger.addHandler(console_handler)

    if log_path:
        logs_dir = Path(log_path)
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "edgarparse.log",
            maxBytes=10485760,  # 10MB
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.set_name(FILE_HANDLER)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter())
        root_logger.addHandler(file_handler)


def get_logger(
    name: str,
    context: Optional[dict[str, Any]] = None,
) -> logging.Logger | ContextAdapter:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically module name).
        context: Optional context dict to add to all log messages.

    Returns:
        Logger instance, optionally wrapped with ContextAdapter.
    """
    logger = logging.getLogger(name)

    if context:
        return ContextAdapter(logger, context)

    return logger


def log_operation(
    logger: logging.Logger,
    operation: str,
    success: bool,
    duration_ms: Optional[float] = None,
    **kwargs: Any,
) -> None:
    """
    Log an operation result with structured data.

    Args:
        logger: Logger instance.
        operation: Name of the operation.
        success: Whether operation succeeded.
        duration_ms: Operation duration in milliseconds.
        **kwargs: Additional context to log.
    """
    extra_fields = {
        "operation": operation,
        "success": success,
    }
    if duration_ms is not None:
        extra_fields["duration_ms"] = duration_ms
    extra_fields.update(kwargs)

    level = logging.INFO if success else logging.ERROR
    message = f"Operation '{operation}' {'succeeded' if success else 'failed'}"

    logger.log(level, message, extra={"extra_fields": extra_fields})
