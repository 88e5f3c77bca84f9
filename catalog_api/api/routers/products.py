from __future__ import annotations

from fastapi import APIRouter

from catalog_api.api.deps import Products
from catalog_api.schemas.products import Ack, ProductIn, ProductOut
from catalog_api.services.products import ProductService

router = APIRouter()


@router.post("", response_model=Ack)
def create_product(payload: ProductIn, service: ProductService = Products):
    # the new id is not returned; clients re-list
    service.create(payload)
    return Ack(success=True, message="product added successfully")


@router.get("", response_model=list[ProductOut])
def list_products(service: ProductService = Products):
    return service.list_all()
