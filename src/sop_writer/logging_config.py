# logging_config.py
import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

# Get the project root directory
project_root = Path(__file__).parent.parent.parent

REDACTED = "****REDACTED****"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class SensitiveDataFilter(logging.Filter):
    """Filter to remove sensitive data from log records."""

    def __init__(self, sensitive_patterns=None):
        super().__init__()
        self.sensitive_patterns = sensitive_patterns or ['password', 'token', 'api_key', 'secret']
        self.secret_values: Set[str] = set()
        self._pattern = re.compile(
            r"(?i)\b(%s)\b(\s*[=:]\s*)(\S+)" % "|".join(map(re.escape, self.sensitive_patterns))
        )

    def add_secrets(self, values: Iterable[str]) -> None:
        self.secret_values.update(v for v in values if v)

    def redact(self, text: str) -> str:
        for value in self.secret_values:
            text = text.replace(value, REDACTED)
        return self._pattern.sub(lambda m: f"{m.group(1)}{m.group(2)}{REDACTED}", text)

    def filter(self, record):
        # Render once so secrets passed through %-args are redacted too
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


_sensitive_filter = SensitiveDataFilter()


def redact_secrets(*values: str) -> None:
    """Register secret values (API keys) that must never reach a log sink."""
    _sensitive_filter.add_secrets(values)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": _sensitive_filter.redact(str(record.exc_info[1])),
                "traceback": _sensitive_filter.redact(self.formatException(record.exc_info)),
            }

        # Add extra fields if present
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = _sensitive_filter.redact(value) if isinstance(value, str) else value

        return json.dumps(log_data, default=str)


def setup_logging(name: str, level: Optional[str] = None) -> logging.Logger:
    """Set up logging configuration."""
    # Get log level from environment variable or use default
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    # Get log directory from environment variable or use default
    log_dir = os.getenv("LOG_DIR", str(project_root / "logs"))

    # Create logs directory if it doesn't exist
    os.makedirs(log_dir, exist_ok=True)

    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JSONFormatter()

    # Create file handler
    log_file = os.path.join(log_dir, f"{name}.log")
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10485760,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(_sensitive_filter)
    logger.addHandler(file_handler)

    # Create console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_sensitive_filter)
    logger.addHandler(console_handler)

    # Log debug message if debug logging is enabled
    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger


def set_level(level: str) -> None:
    """Apply a log level to every logger created by setup_logging."""
    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and logger.name.startswith("sop_writer"):
            logger.setLevel(level.upper())
