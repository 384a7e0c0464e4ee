from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tasknest.config import SETTINGS

Base = declarative_base()


def make_engine(url: str) -> Engine:
    """Engine for ``url``. SQLite connections are shared with Qt callbacks."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # a private in-memory database lives only as long as its one connection
        options["poolclass"] = StaticPool
    return create_engine(url, **options)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = make_engine(SETTINGS.database_url)
SessionLocal = make_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    from . import models  # noqa: F401

    bind = bind or engine
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))
    Base.metadata.create_all(bind=bind)
