import logging
import logging.handlers
import sys
import os
from typing import Optional
from donor_registry.core.config import settings

# Third-party loggers and the level they are held at. Request lines come
# from our own middleware, so uvicorn's access log would only duplicate them.
LIBRARY_LOG_LEVELS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "alembic": logging.INFO,
    "multipart": logging.WARNING,
}


class RequestIDFilter(logging.Filter):
    """Guarantees %(request_id)s for records logged outside a request."""

    def filter(self, record):
        if not getattr(record, "request_id", None):
            record.request_id = "N/A"
        return True


def _file_handler(path: str, level: int) -> logging.Handler:
    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> logging.Logger:
    """
    Route the root logger to stdout and, outside DEBUG, to a rotating
    donor_registry log file. Every handler stamps records with a request id.
    Returns the package logger.
    """
    level_no = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(log_format or settings.LOG_FORMAT)
    request_id_filter = RequestIDFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level_no)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    handlers[0].setLevel(level_no)
    if log_file is None and not settings.DEBUG:
        log_file = settings.LOG_FILE
    if log_file:
        handlers.append(_file_handler(log_file, level_no))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(request_id_filter)
        root_logger.addHandler(handler)

    for name, lib_level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(lib_level)

    return logging.getLogger("donor_registry")


logger = setup_logging()
