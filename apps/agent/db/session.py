from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.logging import get_agent_logger

from .models import Base

logger = get_agent_logger(__name__)


def create_rules_engine(database_url: str) -> Engine:
    kwargs = {"pool_pre_ping": True, "future": True}
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        # in-memory SQLite lives on a single connection
        kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
    engine = create_engine(database_url, **kwargs)
    Base.metadata.create_all(engine)
    logger.info("Rule database engine configured url=%s", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
