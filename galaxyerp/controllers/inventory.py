"""库存控制器：物料、仓库。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.inventory import (
    ItemCreateRequest,
    ItemUpdateRequest,
    WarehouseCreateRequest,
    WarehouseUpdateRequest,
    item_fields,
    to_item_response,
    to_warehouse_response,
    warehouse_fields,
)
from galaxyerp.services import ItemService, WarehouseService

from .crud import register_crud_routes

router = APIRouter(prefix="/inventory", tags=["inventory"])

register_crud_routes(
    router,
    "/items",
    service_cls=ItemService,
    create_model=ItemCreateRequest,
    update_model=ItemUpdateRequest,
    to_fields=item_fields,
    to_response=to_item_response,
    label="物料",
)
register_crud_routes(
    router,
    "/warehouses",
    service_cls=WarehouseService,
    create_model=WarehouseCreateRequest,
    update_model=WarehouseUpdateRequest,
    to_fields=warehouse_fields,
    to_response=to_warehouse_response,
    label="仓库",
)

__all__ = ["router"]
