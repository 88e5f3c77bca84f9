from fastapi import Depends, Request

from catalog_api.infra.resources import Resources
from catalog_api.infra.storage_s3 import UploadUrlIssuer
from catalog_api.services.products import ProductService


def get_resources(request: Request) -> Resources:
    return request.app.state.resources


def get_uploads(resources: Resources = Depends(get_resources)) -> UploadUrlIssuer:
    return resources.uploads


def get_product_service(resources: Resources = Depends(get_resources)) -> ProductService:
    resources.ensure_schema()
    return ProductService(
        resources.session_factory,
        uploads=resources.uploads,
        verify_uploads=resources.settings.VERIFY_UPLOADS,
    )


Uploads = Depends(get_uploads)
Products = Depends(get_product_service)
