"""
Database engine and session handling.

Every gateway call opens its own connection (``NullPool``), runs one
statement and closes it again; nothing is shared between calls.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_database_url(settings):
    """Combine the configured URL with the separately configured credentials."""
    url = make_url(settings.database_url)
    # SQLite URLs reject credentials outright.
    if url.get_backend_name() != "sqlite" and not url.username:
        url = url.set(
            username=settings.database_user or None,
            password=settings.database_password or None,
        )
    return url


def create_db_engine(settings):
    """Create an engine that hands out a fresh connection per operation."""
    return create_engine(build_database_url(settings), poolclass=NullPool)


def create_session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine):
    """Create any missing tables."""
    # Register the models on Base.metadata.
    from garage_booking import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready on %s", engine.url.render_as_string(hide_password=True))
