# catalog_api/api/routers/health.py
from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from catalog_api.api.deps import get_resources
from catalog_api.errors import UpstreamUnavailable
from catalog_api.infra.db import ping
from catalog_api.infra.resources import Resources

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def hello() -> str:
    return "hello world"


@router.head("/health", include_in_schema=False)
def health_head() -> Response:
    # uptime monitors use HEAD; status only
    return Response(status_code=200)


@router.get("/health")
def health(resources: Resources = Depends(get_resources)) -> dict[str, Any]:
    started = time.time()

    db_ok = False
    db_error: str | None = None
    try:
        ping(resources.engine)
        db_ok = True
    except UpstreamUnavailable as e:
        # message only; never the URL
        db_error = e.message

    storage_ok = resources.uploads.configured
    elapsed_ms = int((time.time() - started) * 1000)

    return {
        "ok": db_ok and storage_ok,
        "db": {"ok": db_ok, "error": db_error},
        "storage": {"configured": storage_ok},
        "elapsed_ms": elapsed_ms,
    }
