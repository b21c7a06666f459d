"""采购控制器：供应商。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.partners import (
    SupplierCreateRequest,
    SupplierUpdateRequest,
    supplier_fields,
    to_supplier_response,
)
from galaxyerp.services import SupplierService

from .crud import register_crud_routes

router = APIRouter(prefix="/purchase", tags=["purchase"])

register_crud_routes(
    router,
    "/suppliers",
    service_cls=SupplierService,
    create_model=SupplierCreateRequest,
    update_model=SupplierUpdateRequest,
    to_fields=supplier_fields,
    to_response=to_supplier_response,
    label="供应商",
)

__all__ = ["router"]
