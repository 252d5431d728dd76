from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import List

from pdf_compressor.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s session_id=%(session_id)s %(message)s"
LOG_FILE_NAME = "pdf_compressor.log"


class SessionIdFilter(logging.Filter):
    """
    Ensures every log record has session_id attribute, so records logged
    outside a browser session (startup, registry purges) still format.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        return True


def build_handlers(settings: Settings) -> List[logging.Handler]:
    """Console handler plus, when `settings.log_max_bytes` > 0, a rotating file."""
    fmt = logging.Formatter(fmt=LOG_FORMAT)
    session_filter = SessionIdFilter()

    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings.log_max_bytes > 0:
        settings.logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(settings.logs_dir / LOG_FILE_NAME),
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            )
        )

    for h in handlers:
        h.setFormatter(fmt)
        h.addFilter(session_filter)
    return handlers


def setup_logging(settings: Settings) -> bool:
    """Configure the root logger from `settings`. Returns False if already configured."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicated handlers on reloads
    if root.handlers:
        return False

    for h in build_handlers(settings):
        root.addHandler(h)

    # qpdf chatter and per-request access lines only when debugging
    quiet = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    logging.getLogger("uvicorn.access").setLevel(quiet)
    logging.getLogger("pikepdf").setLevel(quiet)
    return True
