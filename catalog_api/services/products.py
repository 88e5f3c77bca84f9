from __future__ import annotations

import math
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from catalog_api.errors import ValidationFailed
from catalog_api.infra.db import session_scope
from catalog_api.infra.models import ProductORM
from catalog_api.infra.storage_s3 import UploadUrlIssuer
from catalog_api.logging import get_logger
from catalog_api.schemas.products import ProductCreate, ProductIn, ProductOut

log = get_logger(__name__)

REQUIRED_FIELDS = ("name", "description", "price", "filename")


def check_required(payload: ProductIn) -> ProductCreate:
    """Presence check only. Strings are stripped; a price of 0 counts as present."""
    values = {}
    missing = []
    for field in REQUIRED_FIELDS:
        v = getattr(payload, field)
        if isinstance(v, str):
            v = v.strip()
        if v is None or v == "":
            missing.append(field)
        values[field] = v

    if missing:
        raise ValidationFailed("provide all fields", fields=missing)
    # NaN and Infinity parse as JSON but cannot be stored or listed back
    if not math.isfinite(values["price"]):
        raise ValidationFailed("price must be a finite number", fields=["price"])
    return ProductCreate(**values)


class ProductService:
    def __init__(
        self,
        session_factory: Optional[sessionmaker],
        uploads: Optional[UploadUrlIssuer] = None,
        verify_uploads: bool = False,
    ) -> None:
        self._factory = session_factory
        self._uploads = uploads
        self._verify = verify_uploads

    def create(self, payload: ProductIn) -> None:
        data = check_required(payload)

        if self._verify and self._uploads is not None:
            if not self._uploads.exists(data.filename):
                raise ValidationFailed("uploaded file not found", fields=["filename"])

        with session_scope(self._factory) as db:
            db.add(ProductORM(**data.model_dump()))
            db.flush()

        log.info("product created name={!r} filename={!r}", data.name, data.filename)

    def list_all(self) -> list[ProductOut]:
        with session_scope(self._factory) as db:
            products = db.execute(select(ProductORM)).scalars().all()
            return [ProductOut.model_validate(p) for p in products]
