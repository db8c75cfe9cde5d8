#mystack_controller\infrastructure\postgres\database.py

"""Engine, session factory and schema setup for the cluster config store."""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from mystack_controller.infrastructure.postgres.config import settings


Base = declarative_base()


# ============================================
# Engine
# ============================================
def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """
    Build an engine for database_url (settings.database_url by default).

    Pool tuning and the search_path hook only apply to PostgreSQL; any
    other URL (e.g. sqlite for local runs) gets a plain engine.
    """
    url = database_url or settings.database_url

    if not url.startswith("postgresql"):
        return create_engine(url, echo=settings.echo_sql)

    engine = create_engine(
        url,
        echo=settings.echo_sql,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_recycle=settings.pool_recycle,
    )

    @event.listens_for(engine, "connect")
    def use_public_schema(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("SET search_path TO public")
        cursor.close()

    return engine


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Process-wide engine; nothing connects until the first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


# ============================================
# Sessions
# ============================================
def get_session_factory(engine_instance: Optional[Engine] = None):
    """Session factory bound to engine_instance, or to the process engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine_instance or get_engine(),
        expire_on_commit=False
    )


@contextmanager
def session_scope(session_factory) -> Generator[Session, None, None]:
    """
    Commit on success, roll back and re-raise on any error.

    Usage:
        with session_scope(factory) as session:
            session.add(ClusterConfigORM(name="web", yaml="apps: {}"))
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ============================================
# Schema
# ============================================
def init_db(engine_instance: Optional[Engine] = None) -> None:
    """Create the clusters table if it does not exist."""
    # Registers ClusterConfigORM on Base.metadata
    from mystack_controller.infrastructure.postgres import models  # noqa: F401

    Base.metadata.create_all(bind=engine_instance or get_engine())
