from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog_api.config import Settings, get_settings
from catalog_api.errors import CatalogError, UpstreamUnavailable
from catalog_api.infra.resources import open_resources
from catalog_api.logging import get_logger, setup_logging

from catalog_api.api.routers.health import router as health_router
from catalog_api.api.routers.products import router as products_router
from catalog_api.api.routers.uploads import router as uploads_router

log = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, s3_client=None) -> FastAPI:
    """Build the API. `s3_client` replaces the boto3 client built from settings."""
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Product Catalog API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    log.info("CORS allow_origins = {}", settings.origins)

    @app.on_event("startup")
    def _startup() -> None:
        log.info("opening resources...")
        app.state.resources = open_resources(settings, s3_client=s3_client)

    @app.on_event("shutdown")
    def _shutdown() -> None:
        resources = getattr(app.state, "resources", None)
        if resources is not None:
            resources.close()

    @app.exception_handler(CatalogError)
    async def _catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        if isinstance(exc, UpstreamUnavailable):
            log.error("{} {} -> {} unavailable: {}", request.method, request.url.path, exc.upstream, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "validation_error",
                "message": "invalid request body",
                # echoed input may hold NaN, which JSONResponse refuses to render
                "details": jsonable_encoder(
                    [{k: e[k] for k in ("type", "loc", "msg") if k in e} for e in exc.errors()]
                ),
            },
        )

    app.include_router(health_router, tags=["health"])
    app.include_router(uploads_router, prefix="/api", tags=["uploads"])
    app.include_router(products_router, prefix="/api/products", tags=["products"])

    return app

