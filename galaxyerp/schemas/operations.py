"""生产与项目模型：产品、项目。"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator

from galaxyerp.application.validation.types import MAX_ID, Currency, DateField, ensure_not_before
from galaxyerp.domain.models import Product, Project

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

ProductStatus = Literal["active", "inactive", "discontinued"]
ProjectStatus = Literal["planning", "active", "on_hold", "completed", "cancelled"]
ProjectPriority = Literal["low", "medium", "high", "urgent"]


# ==================== 产品 ====================


class ProductCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="产品编码")
    name: str = Field(..., min_length=1, max_length=100, description="产品名称")
    description: str | None = Field(default=None, max_length=500, description="描述")
    category: str | None = Field(default=None, max_length=50, description="分类")
    unit: str = Field(default="pcs", min_length=1, max_length=20, description="单位")
    price: Currency = Field(default=0, description="售价")
    cost: Currency = Field(default=0, description="成本")
    status: ProductStatus = Field(default="active", description="状态")


class ProductUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    category: str | None = Field(default=None, max_length=50)
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    price: Currency | None = None
    cost: Currency | None = None
    status: ProductStatus | None = None


class ProductResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    category: str | None = None
    unit: str
    price: float
    cost: float
    status: str


def product_fields(request: ProductCreateRequest | ProductUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "category": request.category,
        "unit": request.unit,
        "price": request.price,
        "cost": request.cost,
        "status": request.status,
    })


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        code=product.code,
        name=product.name,
        description=product.description,
        category=product.category,
        unit=product.unit,
        price=product.price or 0,
        cost=product.cost or 0,
        status=product.status,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


# ==================== 项目 ====================


class ProjectCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="项目编码")
    name: str = Field(..., min_length=1, max_length=100, description="项目名称")
    description: str | None = Field(default=None, max_length=1000, description="描述")
    start_date: DateField = Field(..., description="开始日期")
    end_date: DateField | None = Field(default=None, description="结束日期")
    status: ProjectStatus = Field(default="planning", description="状态")
    priority: ProjectPriority = Field(default="medium", description="优先级")
    budget: Currency = Field(default=0, description="预算")
    manager_id: int = Field(..., gt=0, le=MAX_ID, description="项目经理ID")

    @field_validator("end_date")
    @classmethod
    def end_not_before_start(cls, v: date | None, info: ValidationInfo) -> date | None:
        return ensure_not_before(v, info, "start_date")


class ProjectUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    start_date: DateField | None = None
    end_date: DateField | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    budget: Currency | None = None
    manager_id: int | None = Field(default=None, gt=0, le=MAX_ID)

    @field_validator("end_date")
    @classmethod
    def end_not_before_start(cls, v: date | None, info: ValidationInfo) -> date | None:
        return ensure_not_before(v, info, "start_date")


class ProjectResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    start_date: date
    end_date: date | None = None
    status: str
    priority: str
    budget: float
    manager_id: int


def project_fields(request: ProjectCreateRequest | ProjectUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "start_date": request.start_date,
        "end_date": request.end_date,
        "status": request.status,
        "priority": request.priority,
        "budget": request.budget,
        "manager_id": request.manager_id,
    })


def to_project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        code=project.code,
        name=project.name,
        description=project.description,
        start_date=project.start_date,
        end_date=project.end_date,
        status=project.status,
        priority=project.priority,
        budget=project.budget or 0,
        manager_id=project.manager_id,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


__all__ = [
    "ProductCreateRequest",
    "ProductResponse",
    "ProductUpdateRequest",
    "ProjectCreateRequest",
    "ProjectResponse",
    "ProjectUpdateRequest",
    "product_fields",
    "project_fields",
    "to_product_response",
    "to_project_response",
]
