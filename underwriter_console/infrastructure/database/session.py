"""Database session management for the local session store"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from underwriter_console.config import settings
from underwriter_console.infrastructure.database.models import Base


def create_storage_engine(url: str) -> Engine:
    """
    Build an engine for the storage URL.

    SQLite is the usual choice; an in-memory database must share one
    connection or every checkout would see an empty schema.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(url, pool_pre_ping=True, pool_recycle=3600)

    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def default_session_factory() -> sessionmaker:
    """Session factory bound to the configured storage URL"""
    return create_session_factory(create_storage_engine(settings.storage_url))
