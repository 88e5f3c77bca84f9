from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from catalog_api.config import Settings
from catalog_api.errors import UpstreamUnavailable
from catalog_api.infra.db import build_engine, build_session_factory, init_schema, ping
from catalog_api.infra.storage_s3 import UploadUrlIssuer, build_s3_client
from catalog_api.logging import get_logger

log = get_logger(__name__)


@dataclass
class Resources:
    """Long-lived handles shared by every request. Built once, closed once."""

    settings: Settings
    engine: Optional[Engine]
    session_factory: Optional[sessionmaker]
    uploads: UploadUrlIssuer
    schema_ready: bool = False
    _schema_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def ensure_schema(self) -> None:
        """Create the tables if startup could not. Raises while the database stays down."""
        if self.schema_ready:
            return
        if self.engine is None:
            raise UpstreamUnavailable("database", "database is not configured")

        with self._schema_lock:
            if self.schema_ready:
                return
            try:
                init_schema(self.engine)
            except SQLAlchemyError as e:
                raise UpstreamUnavailable("database", "database is unreachable") from e
            self.schema_ready = True
            log.info("tables created/checked")

    def close(self) -> None:
        self.uploads.close()
        if self.engine is not None:
            self.engine.dispose()
        log.info("resources closed")


def _open_database(settings: Settings) -> tuple[Optional[Engine], Optional[sessionmaker]]:
    if not settings.DATABASE_URL:
        log.error("DATABASE_URL is not set; product endpoints will answer 503")
        return None, None

    try:
        engine = build_engine(settings.DATABASE_URL)
    except (SQLAlchemyError, ImportError, ValueError) as e:
        log.error("invalid DATABASE_URL: {}", e)
        return None, None

    return engine, build_session_factory(engine)


def open_resources(settings: Settings, s3_client=None) -> Resources:
    engine, factory = _open_database(settings)

    if s3_client is None:
        try:
            s3_client = build_s3_client(settings)
        except UpstreamUnavailable as e:
            log.error("{}", e)
    uploads = UploadUrlIssuer(
        s3_client,
        bucket=settings.S3_BUCKET_NAME,
        allowed_extensions=settings.upload_extensions,
    )
    if not uploads.configured:
        log.error("S3 storage is not configured; presigned URLs will answer 503")

    resources = Resources(
        settings=settings,
        engine=engine,
        session_factory=factory,
        uploads=uploads,
    )

    # a dead database leaves the process up in degraded mode; product
    # requests retry the schema until it succeeds
    if engine is not None:
        try:
            ping(engine)
            log.info("creating tables...")
            resources.ensure_schema()
        except UpstreamUnavailable as e:
            log.error("database unavailable at startup: {}", e.__cause__ or e)

    return resources
