from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from catalog_api.errors import UpstreamUnavailable
from catalog_api.infra.models import Base


def build_engine(url: str) -> Engine:
    kwargs = {}
    if url.startswith("sqlite"):
        # sync handlers run on the threadpool
        kwargs["connect_args"] = {"check_same_thread": False}

    return create_engine(
        url,
        pool_pre_ping=True,
        future=True,
        **kwargs,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        class_=Session,
    )


def init_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


def ping(engine: Optional[Engine]) -> None:
    if engine is None:
        raise UpstreamUnavailable("database", "database is not configured")
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise UpstreamUnavailable("database", "database is unreachable") from e


@contextmanager
def session_scope(factory: Optional[sessionmaker]) -> Iterator[Session]:
    """Commit on success, roll back on error, always close."""
    if factory is None:
        raise UpstreamUnavailable("database", "database is not configured")

    db = factory()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise UpstreamUnavailable("database", "database operation failed") from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
