"""
Structured Logging Configuration Module

Console loggers live under the `admin_console` namespace. Mutations are
recorded through `log_action`, which attaches who did what to which resource
so the JSON output can be filtered by admin or action.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Record attributes written by log_action
AUDIT_FIELDS = ("user_id", "action", "resource", "details")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line; audit fields only when present"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in AUDIT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _build_handler(log_format: str, log_file: Optional[str]) -> logging.Handler:
    handler: logging.Handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    formatter = JSONFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str = "INFO", logger_name: str = "admin_console",
                  log_format: str = "json", log_file: Optional[str] = None) -> logging.Logger:
    """
    Point a console logger at a single handler.

    Args:
        level: Level name (DEBUG, INFO, ...)
        logger_name: Logger to configure; child loggers inherit the handler
        log_format: "json" or "text"
        log_file: Write to this file instead of stderr

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.addHandler(_build_handler(log_format, log_file))
    logger.setLevel(level.upper())
    logger.propagate = False
    return logger


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, details: Optional[dict] = None) -> None:
    """Log a console mutation with the acting admin and the affected resource"""
    audit = {"user_id": user_id, "action": action, "resource": resource, "details": details}
    logger.log(
        logging.getLevelName(level.upper()),
        message,
        extra={k: v for k, v in audit.items() if v}
    )
