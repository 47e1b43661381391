import datetime
import logging
import os
from flask import g, has_request_context

LOGGER_NAME = "chat_images"

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)


class _IsoFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        return datetime.datetime.fromtimestamp(record.created, datetime.timezone.utc).isoformat()


def configure(path):
    """
    Point the debug log at `path`, replacing any file handler installed by a
    previous app instance in the same process.
    """
    for handler in list(logger.handlers):
        if getattr(handler, "_debug_log", False):
            logger.removeHandler(handler)
            handler.close()

    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler._debug_log = True
    handler.setFormatter(_IsoFormatter("%(asctime)s [%(request_id)s] %(message)s"))
    logger.addHandler(handler)
    return handler


def log_debug(msg, request_id=None, level=logging.INFO):
    if request_id is None:
        request_id = getattr(g, "request_id", "unknown") if has_request_context() else "-"
    logger.log(level, msg, extra={"request_id": request_id})
