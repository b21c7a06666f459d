"""会计模型：科目、会计分录、收付款。"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from galaxyerp.application.validation.types import MAX_ID, AccountCode, Currency, DateField, fixed_length
from galaxyerp.domain.models import Account, JournalEntry, JournalEntryLine, Payment

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

AccountType = Literal["asset", "liability", "equity", "revenue", "expense"]
AccountStatus = Literal["active", "inactive"]
CurrencyCode = Annotated[str, fixed_length(3)]
PaymentType = Literal["payment", "receipt"]
PaymentMethod = Literal["cash", "bank_transfer", "check", "credit_card", "other"]
PaymentStatus = Literal["pending", "completed", "cancelled"]

# 响应字段名 date 会遮蔽 datetime.date
EntryDate = date


# ==================== 科目 ====================


class AccountCreateRequest(RequestModel):
    code: AccountCode = Field(..., description="科目编码")
    name: str = Field(..., min_length=1, max_length=100, description="科目名称")
    description: str | None = Field(default=None, max_length=500, description="描述")
    account_type: AccountType = Field(..., description="科目类型")
    parent_id: int | None = Field(default=None, gt=0, le=MAX_ID, description="父科目ID")
    currency: CurrencyCode = Field(default="CNY", description="币种")
    status: AccountStatus = Field(default="active", description="状态")


class AccountUpdateRequest(UpdateRequestModel):
    code: AccountCode | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    account_type: AccountType | None = None
    parent_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    currency: CurrencyCode | None = None
    status: AccountStatus | None = None


class AccountResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    account_type: str
    parent_id: int | None = None
    balance: float
    currency: str
    status: str


def account_fields(request: AccountCreateRequest | AccountUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "account_type": request.account_type,
        "parent_id": request.parent_id,
        "currency": request.currency,
        "status": request.status,
    })


def to_account_response(account: Account) -> AccountResponse:
    return AccountResponse(
        id=account.id,
        code=account.code,
        name=account.name,
        description=account.description,
        account_type=account.account_type,
        parent_id=account.parent_id,
        balance=account.balance or 0,
        currency=account.currency,
        status=account.status,
        created_at=account.created_at,
        updated_at=account.updated_at,
    )


# ==================== 会计分录 ====================


class JournalEntryLineRequest(RequestModel):
    account_id: int = Field(..., gt=0, le=MAX_ID, description="科目ID")
    debit_amount: Currency = Field(default=0, description="借方金额")
    credit_amount: Currency = Field(default=0, description="贷方金额")
    description: str | None = Field(default=None, max_length=500, description="摘要")


class JournalEntryCreateRequest(RequestModel):
    entry_date: DateField = Field(..., alias="date", description="分录日期")
    reference: str | None = Field(default=None, max_length=100, description="参考号")
    description: str = Field(..., min_length=1, max_length=500, description="摘要")
    lines: list[JournalEntryLineRequest] = Field(..., alias="items", min_length=2, description="分录明细")


class JournalEntryUpdateRequest(UpdateRequestModel):
    entry_date: DateField | None = Field(default=None, alias="date")
    reference: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    lines: list[JournalEntryLineRequest] | None = Field(default=None, alias="items", min_length=2)


class JournalEntryLineResponse(BaseModel):
    id: int
    account_id: int
    account_code: str | None = None
    account_name: str | None = None
    debit_amount: float
    credit_amount: float
    description: str | None = None


class JournalEntryResponse(ResponseModel):
    number: str | None = None
    date: EntryDate
    reference: str | None = None
    description: str
    total_debit: float
    total_credit: float
    status: str
    created_by: int | None = None
    items: list[JournalEntryLineResponse] = Field(default_factory=list)


def journal_entry_fields(request: JournalEntryCreateRequest | JournalEntryUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "entry_date": request.entry_date,
        "reference": request.reference,
        "description": request.description,
    })


def journal_line_fields(lines: list[JournalEntryLineRequest] | None) -> list[dict[str, Any]] | None:
    if lines is None:
        return None
    return [
        {
            "account_id": line.account_id,
            "debit_amount": line.debit_amount,
            "credit_amount": line.credit_amount,
            "description": line.description,
        }
        for line in lines
    ]


def to_journal_line_response(line: JournalEntryLine) -> JournalEntryLineResponse:
    return JournalEntryLineResponse(
        id=line.id,
        account_id=line.account_id,
        account_code=line.account.code if line.account else None,
        account_name=line.account.name if line.account else None,
        debit_amount=line.debit_amount or 0,
        credit_amount=line.credit_amount or 0,
        description=line.description,
    )


def to_journal_entry_response(entry: JournalEntry) -> JournalEntryResponse:
    return JournalEntryResponse(
        id=entry.id,
        number=entry.number,
        date=entry.entry_date,
        reference=entry.reference,
        description=entry.description,
        total_debit=entry.total_debit or 0,
        total_credit=entry.total_credit or 0,
        status=entry.status,
        created_by=entry.created_by,
        items=[to_journal_line_response(line) for line in entry.lines],
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


# ==================== 收付款 ====================


class PaymentCreateRequest(RequestModel):
    payment_type: PaymentType = Field(..., description="类型")
    amount: Currency = Field(..., gt=0, description="金额")
    payment_date: DateField = Field(..., description="日期")
    reference: str | None = Field(default=None, max_length=100, description="参考号")
    description: str | None = Field(default=None, max_length=500, description="摘要")
    account_id: int = Field(..., gt=0, le=MAX_ID, description="科目ID")
    customer_id: int | None = Field(default=None, gt=0, le=MAX_ID, description="客户ID")
    supplier_id: int | None = Field(default=None, gt=0, le=MAX_ID, description="供应商ID")
    payment_method: PaymentMethod = Field(..., description="支付方式")


class PaymentUpdateRequest(UpdateRequestModel):
    payment_type: PaymentType | None = None
    amount: Currency | None = Field(default=None, gt=0)
    payment_date: DateField | None = None
    reference: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    account_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    customer_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    supplier_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    payment_method: PaymentMethod | None = None


class PaymentStatusUpdateRequest(RequestModel):
    status: PaymentStatus = Field(..., description="目标状态")


class PaymentResponse(ResponseModel):
    number: str | None = None
    payment_type: str
    amount: float
    payment_date: date
    reference: str | None = None
    description: str | None = None
    account_id: int
    customer_id: int | None = None
    supplier_id: int | None = None
    payment_method: str
    status: str


def payment_fields(request: PaymentCreateRequest | PaymentUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "payment_type": request.payment_type,
        "amount": request.amount,
        "payment_date": request.payment_date,
        "reference": request.reference,
        "description": request.description,
        "account_id": request.account_id,
        "customer_id": request.customer_id,
        "supplier_id": request.supplier_id,
        "payment_method": request.payment_method,
    })


def to_payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,
        number=payment.number,
        payment_type=payment.payment_type,
        amount=payment.amount,
        payment_date=payment.payment_date,
        reference=payment.reference,
        description=payment.description,
        account_id=payment.account_id,
        customer_id=payment.customer_id,
        supplier_id=payment.supplier_id,
        payment_method=payment.payment_method,
        status=payment.status,
        created_at=payment.created_at,
        updated_at=payment.updated_at,
    )


__all__ = [
    "AccountCreateRequest",
    "AccountResponse",
    "AccountUpdateRequest",
    "JournalEntryCreateRequest",
    "JournalEntryLineRequest",
    "JournalEntryResponse",
    "JournalEntryUpdateRequest",
    "PaymentCreateRequest",
    "PaymentResponse",
    "PaymentStatusUpdateRequest",
    "PaymentUpdateRequest",
    "account_fields",
    "journal_entry_fields",
    "journal_line_fields",
    "payment_fields",
    "to_account_response",
    "to_journal_entry_response",
    "to_payment_response",
]
