"""往来单位模型：客户（销售）、供应商（采购）。"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from galaxyerp.application.validation.types import BankCard, Currency, Email, Phone
from galaxyerp.domain.models import Customer, Supplier

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

CustomerType = Literal["individual", "corporate"]


class CustomerCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="客户编码")
    name: str = Field(..., min_length=1, max_length=100, description="客户名称")
    customer_type: CustomerType = Field(default="corporate", description="客户类型")
    contact_name: str | None = Field(default=None, max_length=50, description="联系人")
    email: Email | None = Field(default=None, description="邮箱")
    phone: Phone | None = Field(default=None, description="电话")
    address: str | None = Field(default=None, max_length=255, description="地址")
    tax_number: str | None = Field(default=None, max_length=50, description="税号")
    credit_limit: Currency = Field(default=0, description="信用额度")
    is_active: bool = Field(default=True, description="是否启用")


class CustomerUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    customer_type: CustomerType | None = None
    contact_name: str | None = Field(default=None, max_length=50)
    email: Email | None = None
    phone: Phone | None = None
    address: str | None = Field(default=None, max_length=255)
    tax_number: str | None = Field(default=None, max_length=50)
    credit_limit: Currency | None = None
    is_active: bool | None = None


class CustomerResponse(ResponseModel):
    code: str
    name: str
    customer_type: str
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    tax_number: str | None = None
    credit_limit: float
    is_active: bool


def customer_fields(request: CustomerCreateRequest | CustomerUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "customer_type": request.customer_type,
        "contact_name": request.contact_name,
        "email": request.email,
        "phone": request.phone,
        "address": request.address,
        "tax_number": request.tax_number,
        "credit_limit": request.credit_limit,
        "is_active": request.is_active,
    })


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=customer.id,
        code=customer.code,
        name=customer.name,
        customer_type=customer.customer_type,
        contact_name=customer.contact_name,
        email=customer.email,
        phone=customer.phone,
        address=customer.address,
        tax_number=customer.tax_number,
        credit_limit=customer.credit_limit or 0,
        is_active=customer.is_active,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
    )


class SupplierCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="供应商编码")
    name: str = Field(..., min_length=1, max_length=100, description="供应商名称")
    contact_name: str | None = Field(default=None, max_length=50, description="联系人")
    email: Email | None = Field(default=None, description="邮箱")
    phone: Phone | None = Field(default=None, description="电话")
    address: str | None = Field(default=None, max_length=255, description="地址")
    tax_number: str | None = Field(default=None, max_length=50, description="税号")
    bank_account: BankCard | None = Field(default=None, description="银行账号")
    is_active: bool = Field(default=True, description="是否启用")


class SupplierUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    contact_name: str | None = Field(default=None, max_length=50)
    email: Email | None = None
    phone: Phone | None = None
    address: str | None = Field(default=None, max_length=255)
    tax_number: str | None = Field(default=None, max_length=50)
    bank_account: BankCard | None = None
    is_active: bool | None = None


class SupplierResponse(ResponseModel):
    code: str
    name: str
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    tax_number: str | None = None
    bank_account: str | None = None
    is_active: bool


def supplier_fields(request: SupplierCreateRequest | SupplierUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "contact_name": request.contact_name,
        "email": request.email,
        "phone": request.phone,
        "address": request.address,
        "tax_number": request.tax_number,
        "bank_account": request.bank_account,
        "is_active": request.is_active,
    })


def to_supplier_response(supplier: Supplier) -> SupplierResponse:
    return SupplierResponse(
        id=supplier.id,
        code=supplier.code,
        name=supplier.name,
        contact_name=supplier.contact_name,
        email=supplier.email,
        phone=supplier.phone,
        address=supplier.address,
        tax_number=supplier.tax_number,
        bank_account=supplier.bank_account,
        is_active=supplier.is_active,
        created_at=supplier.created_at,
        updated_at=supplier.updated_at,
    )


__all__ = [
    "CustomerCreateRequest",
    "CustomerResponse",
    "CustomerUpdateRequest",
    "SupplierCreateRequest",
    "SupplierResponse",
    "SupplierUpdateRequest",
    "customer_fields",
    "supplier_fields",
    "to_customer_response",
    "to_supplier_response",
]
