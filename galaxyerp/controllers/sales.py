"""销售控制器：客户。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.partners import (
    CustomerCreateRequest,
    CustomerUpdateRequest,
    customer_fields,
    to_customer_response,
)
from galaxyerp.services import CustomerService

from .crud import register_crud_routes

router = APIRouter(prefix="/sales", tags=["sales"])

register_crud_routes(
    router,
    "/customers",
    service_cls=CustomerService,
    create_model=CustomerCreateRequest,
    update_model=CustomerUpdateRequest,
    to_fields=customer_fields,
    to_response=to_customer_response,
    label="客户",
)

__all__ = ["router"]
