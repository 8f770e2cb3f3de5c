# fleet_portal/utils/logger.py
"""
Logging setup for the portal.

Every line carries the acting role and home location of the request that
produced it (`admin@PTC`, `-` outside a request), so a site's activity can be
grepped out of one log. Two rotating files under LOG_DIR:
  - portal.log          everything at LOG_LEVEL and above
  - security_audit.log  key hand-overs, returns, damage and parts reports only
"""

import logging
import os
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from fleet_portal.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
AUDIT_LOGGER = "fleet_portal.audit"

_request_actor: ContextVar[str] = ContextVar("request_actor", default="-")
_configured = False


def bind_actor(role: Optional[str], location: Optional[str]) -> None:
    """Tag log lines from the current request with the caller's role and site."""
    _request_actor.set(f"{role}@{location or '-'}" if role else "anonymous")


def clear_actor() -> None:
    _request_actor.set("-")


class ActorFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.actor = _request_actor.get()
        return True


def _rotating_file(filename: str, fmt: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(fmt)
    handler.addFilter(ActorFilter())
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(actor)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.addFilter(ActorFilter())

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        os.makedirs(LOG_DIR, exist_ok=True)
        root.addHandler(_rotating_file("portal.log", fmt))
        # Audit lines also propagate to portal.log and the console
        audit = logging.getLogger(AUDIT_LOGGER)
        audit.setLevel(logging.INFO)
        audit.addHandler(_rotating_file("security_audit.log", fmt))

    # httpx logs every webhook request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)


def get_audit_logger() -> logging.Logger:
    """Logger for the security audit trail (security_audit.log)."""
    return get_logger(AUDIT_LOGGER)
