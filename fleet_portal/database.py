# fleet_portal/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy (SQLite by default, PostgreSQL in deployment). All models are
auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from fleet_portal.config import settings


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # SQLite: one file, shared across FastAPI's threadpool
        return {
            "connect_args": {
                "check_same_thread": False,
                "timeout": settings.DB_STATEMENT_TIMEOUT_SECONDS,
            },
        }
    return {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": 10,
        "max_overflow": 20,
        "connect_args": {"connect_timeout": settings.DB_STATEMENT_TIMEOUT_SECONDS},
    }


engine = create_engine(settings.DATABASE_URL, echo=False, **_engine_kwargs())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from fleet_portal.models.vehicle import Vehicle                 # noqa
    from fleet_portal.models.booking import Booking                 # noqa
    from fleet_portal.models.user import User                       # noqa
    from fleet_portal.models.trainer import Trainer                 # noqa
    from fleet_portal.models.service_record import ServiceRecord    # noqa
    from fleet_portal.models.parts_order import PartsOrder          # noqa
    from fleet_portal.models.security_log import SecurityLog        # noqa
    from fleet_portal.models.message import Message                 # noqa
    from fleet_portal.models.notification import Notification       # noqa

    Base.metadata.create_all(bind=bind or engine)
