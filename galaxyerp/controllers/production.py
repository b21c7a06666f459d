"""生产控制器：产品。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.operations import (
    ProductCreateRequest,
    ProductUpdateRequest,
    product_fields,
    to_product_response,
)
from galaxyerp.services import ProductService

from .crud import register_crud_routes

router = APIRouter(prefix="/production", tags=["production"])

register_crud_routes(
    router,
    "/products",
    service_cls=ProductService,
    create_model=ProductCreateRequest,
    update_model=ProductUpdateRequest,
    to_fields=product_fields,
    to_response=to_product_response,
    label="产品",
)

__all__ = ["router"]
