"""库存模型：物料、仓库。"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from galaxyerp.application.validation.types import Currency
from galaxyerp.domain.models import Item, Warehouse

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

ItemType = Literal["raw_material", "semi_finished", "finished_good", "consumable", "service"]


class ItemCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="物料编码")
    name: str = Field(..., min_length=1, max_length=100, description="物料名称")
    description: str | None = Field(default=None, max_length=500, description="描述")
    item_type: ItemType = Field(..., description="物料类型")
    unit: str = Field(default="pcs", min_length=1, max_length=20, description="单位")
    min_stock: float = Field(default=0, ge=0, description="最低库存")
    max_stock: float = Field(default=0, ge=0, description="最高库存")
    unit_cost: Currency = Field(default=0, description="单位成本")
    sale_price: Currency = Field(default=0, description="销售价格")
    barcode: str | None = Field(default=None, max_length=50, description="条码")
    is_active: bool = Field(default=True, description="是否启用")


class ItemUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    item_type: ItemType | None = None
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    min_stock: float | None = Field(default=None, ge=0)
    max_stock: float | None = Field(default=None, ge=0)
    unit_cost: Currency | None = None
    sale_price: Currency | None = None
    barcode: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None


class ItemResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    item_type: str
    unit: str
    min_stock: float
    max_stock: float
    unit_cost: float
    sale_price: float
    barcode: str | None = None
    is_active: bool


def item_fields(request: ItemCreateRequest | ItemUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "item_type": request.item_type,
        "unit": request.unit,
        "min_stock": request.min_stock,
        "max_stock": request.max_stock,
        "unit_cost": request.unit_cost,
        "sale_price": request.sale_price,
        "barcode": request.barcode,
        "is_active": request.is_active,
    })


def to_item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        code=item.code,
        name=item.name,
        description=item.description,
        item_type=item.item_type,
        unit=item.unit,
        min_stock=item.min_stock or 0,
        max_stock=item.max_stock or 0,
        unit_cost=item.unit_cost or 0,
        sale_price=item.sale_price or 0,
        barcode=item.barcode,
        is_active=item.is_active,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class WarehouseCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="仓库编码")
    name: str = Field(..., min_length=1, max_length=100, description="仓库名称")
    description: str | None = Field(default=None, max_length=500, description="描述")
    address: str | None = Field(default=None, max_length=255, description="地址")
    is_active: bool = Field(default=True, description="是否启用")


class WarehouseUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    address: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class WarehouseResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    address: str | None = None
    is_active: bool


def warehouse_fields(request: WarehouseCreateRequest | WarehouseUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "address": request.address,
        "is_active": request.is_active,
    })


def to_warehouse_response(warehouse: Warehouse) -> WarehouseResponse:
    return WarehouseResponse(
        id=warehouse.id,
        code=warehouse.code,
        name=warehouse.name,
        description=warehouse.description,
        address=warehouse.address,
        is_active=warehouse.is_active,
        created_at=warehouse.created_at,
        updated_at=warehouse.updated_at,
    )


__all__ = [
    "ItemCreateRequest",
    "ItemResponse",
    "ItemUpdateRequest",
    "WarehouseCreateRequest",
    "WarehouseResponse",
    "WarehouseUpdateRequest",
    "item_fields",
    "to_item_response",
    "to_warehouse_response",
    "warehouse_fields",
]
