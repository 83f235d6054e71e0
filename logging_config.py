"""Logging setup for the web front.

Records from the application loggers are tagged with the ID of the request
being handled (see ``request_id_var``) and go to stderr and, optionally,
a rotating log file.
"""

import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

# Loggers owned by this application
APP_LOGGERS = ("api", "client", "web", "main")

NO_REQUEST_ID = "-"

# Request ID of the request being handled, set by the request middleware
request_id_var: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST_ID)


class RequestIdFilter(logging.Filter):
    """Logging filter that adds the current request ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that tolerates records created outside the filter."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "request_id"):
            record.request_id = NO_REQUEST_ID
        return super().format(record)


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Configure the root logger with a stream handler and optional file handler.

    Calling it again replaces the handlers installed by a previous call, so
    the app can be created several times in one process (tests).

    Args:
        level: Level name for the application's own loggers.
        log_file: Path of a rotating log file, if any.

    Returns:
        The root logger.
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    for handler in list(root.handlers):
        if getattr(handler, "_hoanhao", False):
            root.removeHandler(handler)

    formatter = SafeFormatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(RequestIdFilter())
    stream_handler._hoanhao = True
    root.addHandler(stream_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(RequestIdFilter())
        file_handler._hoanhao = True
        root.addHandler(file_handler)

    app_level = getattr(logging, level.upper(), logging.INFO)
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(app_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root
