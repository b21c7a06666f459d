"""会计控制器：科目、会计分录、收付款。"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from galaxyerp.application.interfaces.egress import ResponseBuilder
from galaxyerp.application.interfaces.errors import BusinessError
from galaxyerp.application.interfaces.ingress import ListQuery, build_pagination, list_query
from galaxyerp.application.validation import Validator
from galaxyerp.schemas.accounting import (
    AccountCreateRequest,
    AccountUpdateRequest,
    JournalEntryCreateRequest,
    JournalEntryUpdateRequest,
    PaymentCreateRequest,
    PaymentStatusUpdateRequest,
    PaymentUpdateRequest,
    account_fields,
    journal_entry_fields,
    journal_line_fields,
    payment_fields,
    to_account_response,
    to_journal_entry_response,
    to_payment_response,
)
from galaxyerp.services import AccountService, JournalEntryService, PaymentService, line_totals
from galaxyerp.utils.jwt import Principal

from .utils import bind_and_validate, current_principal, get_validator, parse_id, provide

router = APIRouter(prefix="/accounting", tags=["accounting"])

PAGE_SIZE = 10
UNBALANCED_MESSAGE = "借贷金额不平衡"


def ensure_balanced(lines: list[dict[str, Any]]) -> None:
    """借方合计必须等于贷方合计。"""
    total_debit, total_credit = line_totals(lines)
    if total_debit != total_credit:
        raise BusinessError(
            UNBALANCED_MESSAGE,
            details={"total_debit": str(total_debit), "total_credit": str(total_credit)},
        )


# ==================== 科目 ====================


@router.post("/accounts")
async def create_account(
    request: Request,
    service: AccountService = Depends(provide(AccountService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, AccountCreateRequest, validator)
    account = await service.create(account_fields(payload))
    return ResponseBuilder.created(to_account_response(account), "科目创建成功")


@router.get("/accounts")
async def list_accounts(
    account_type: str | None = None,
    parent_id: int | None = None,
    query: ListQuery = Depends(list_query(PAGE_SIZE)),
    service: AccountService = Depends(provide(AccountService)),
) -> JSONResponse:
    accounts, total = await service.list_accounts(query, account_type=account_type, parent_id=parent_id)
    return ResponseBuilder.paginated(
        [to_account_response(account) for account in accounts],
        build_pagination(query, total),
    )


@router.get("/accounts/code/{code}")
async def get_account_by_code(
    code: str,
    service: AccountService = Depends(provide(AccountService)),
) -> JSONResponse:
    account = await service.get_by_code(code)
    return ResponseBuilder.ok(to_account_response(account), "获取成功")


@router.get("/accounts/{id}/children")
async def list_account_children(
    id: str,
    service: AccountService = Depends(provide(AccountService)),
) -> JSONResponse:
    children = await service.children(parse_id(id))
    return ResponseBuilder.ok([to_account_response(account) for account in children], "获取成功")


@router.get("/accounts/{id}")
async def get_account(
    id: str,
    service: AccountService = Depends(provide(AccountService)),
) -> JSONResponse:
    account = await service.get(parse_id(id))
    return ResponseBuilder.ok(to_account_response(account), "获取成功")


@router.put("/accounts/{id}")
async def update_account(
    id: str,
    request: Request,
    service: AccountService = Depends(provide(AccountService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    account_id = parse_id(id)
    payload = await bind_and_validate(request, AccountUpdateRequest, validator)
    account = await service.update(account_id, account_fields(payload))
    return ResponseBuilder.updated(to_account_response(account), "科目更新成功")


@router.delete("/accounts/{id}")
async def delete_account(
    id: str,
    service: AccountService = Depends(provide(AccountService)),
) -> JSONResponse:
    await service.delete(parse_id(id))
    return ResponseBuilder.deleted("科目删除成功")


@router.get("/account-types")
async def list_account_types() -> JSONResponse:
    return ResponseBuilder.ok(AccountService.account_types(), "获取成功")


# ==================== 会计分录 ====================


@router.post("/journal-entries")
async def create_journal_entry(
    request: Request,
    principal: Principal = Depends(current_principal),
    service: JournalEntryService = Depends(provide(JournalEntryService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, JournalEntryCreateRequest, validator)
    lines = journal_line_fields(payload.lines)
    ensure_balanced(lines)
    entry = await service.create(journal_entry_fields(payload), lines, created_by=principal.subject_id)
    return ResponseBuilder.created(to_journal_entry_response(entry), "分录创建成功")


@router.get("/journal-entries")
async def list_journal_entries(
    query: ListQuery = Depends(list_query(PAGE_SIZE)),
    service: JournalEntryService = Depends(provide(JournalEntryService)),
) -> JSONResponse:
    entries, total = await service.list(query)
    return ResponseBuilder.paginated(
        [to_journal_entry_response(entry) for entry in entries],
        build_pagination(query, total),
    )


@router.get("/journal-entries/{id}")
async def get_journal_entry(
    id: str,
    service: JournalEntryService = Depends(provide(JournalEntryService)),
) -> JSONResponse:
    entry = await service.get(parse_id(id))
    return ResponseBuilder.ok(to_journal_entry_response(entry), "获取成功")


@router.put("/journal-entries/{id}")
async def update_journal_entry(
    id: str,
    request: Request,
    service: JournalEntryService = Depends(provide(JournalEntryService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    entry_id = parse_id(id)
    payload = await bind_and_validate(request, JournalEntryUpdateRequest, validator)
    lines = journal_line_fields(payload.lines)
    if lines is not None:
        ensure_balanced(lines)
    entry = await service.update(entry_id, journal_entry_fields(payload), lines)
    return ResponseBuilder.updated(to_journal_entry_response(entry), "分录更新成功")


@router.delete("/journal-entries/{id}")
async def delete_journal_entry(
    id: str,
    service: JournalEntryService = Depends(provide(JournalEntryService)),
) -> JSONResponse:
    await service.delete(parse_id(id))
    return ResponseBuilder.deleted("分录删除成功")


# ==================== 收付款 ====================


@router.post("/payments")
async def create_payment(
    request: Request,
    service: PaymentService = Depends(provide(PaymentService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, PaymentCreateRequest, validator)
    payment = await service.create(payment_fields(payload))
    return ResponseBuilder.created(to_payment_response(payment), "付款记录创建成功")


@router.get("/payments")
async def list_payments(
    payment_type: str | None = None,
    account_id: int | None = None,
    query: ListQuery = Depends(list_query(PAGE_SIZE)),
    service: PaymentService = Depends(provide(PaymentService)),
) -> JSONResponse:
    payments, total = await service.list(query, payment_type=payment_type, account_id=account_id)
    return ResponseBuilder.paginated(
        [to_payment_response(payment) for payment in payments],
        build_pagination(query, total),
    )


@router.get("/payments/{id}")
async def get_payment(
    id: str,
    service: PaymentService = Depends(provide(PaymentService)),
) -> JSONResponse:
    payment = await service.get(parse_id(id))
    return ResponseBuilder.ok(to_payment_response(payment), "获取成功")


@router.put("/payments/{id}/status")
async def update_payment_status(
    id: str,
    request: Request,
    service: PaymentService = Depends(provide(PaymentService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payment_id = parse_id(id)
    payload = await bind_and_validate(request, PaymentStatusUpdateRequest, validator)
    payment = await service.update_status(payment_id, payload.status)
    return ResponseBuilder.updated(to_payment_response(payment), "付款状态更新成功")


@router.put("/payments/{id}")
async def update_payment(
    id: str,
    request: Request,
    service: PaymentService = Depends(provide(PaymentService)),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payment_id = parse_id(id)
    payload = await bind_and_validate(request, PaymentUpdateRequest, validator)
    payment = await service.update(payment_id, payment_fields(payload))
    return ResponseBuilder.updated(to_payment_response(payment), "付款记录更新成功")


@router.delete("/payments/{id}")
async def delete_payment(
    id: str,
    service: PaymentService = Depends(provide(PaymentService)),
) -> JSONResponse:
    await service.delete(parse_id(id))
    return ResponseBuilder.deleted("付款记录删除成功")


__all__ = [
    "UNBALANCED_MESSAGE",
    "ensure_balanced",
    "router",
]
