"""会计服务：科目、会计分录、收付款。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.application.interfaces.errors import BusinessError, NotFoundError
from galaxyerp.application.interfaces.ingress import ListQuery
from galaxyerp.common.logging import log_performance
from galaxyerp.core.transaction import transactional
from galaxyerp.domain.models import (
    ACCOUNT_TYPES,
    Account,
    JournalEntry,
    JournalEntryLine,
    Payment,
)
from galaxyerp.repositories import (
    AccountRepository,
    BaseRepository,
    JournalEntryRepository,
    PaymentRepository,
)

from .base import DEFAULT_SORT_FIELDS, BaseService, CrudService

ACCOUNT_TYPE_LABELS = {
    "asset": "资产",
    "liability": "负债",
    "equity": "所有者权益",
    "revenue": "收入",
    "expense": "费用",
}

PAYMENT_TRANSITIONS = {
    "pending": frozenset({"completed", "cancelled"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
}


def to_decimal(value: Any) -> Decimal:
    """金额转 Decimal（经由字符串，避免二进制浮点误差）。"""
    return Decimal(str(value or 0))


def line_totals(lines: Iterable[Mapping[str, Any]]) -> tuple[Decimal, Decimal]:
    """计算分录行的借方合计与贷方合计。"""
    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for line in lines:
        total_debit += to_decimal(line.get("debit_amount"))
        total_credit += to_decimal(line.get("credit_amount"))
    return total_debit, total_credit


class AccountService(CrudService[Account]):
    """会计科目服务。"""

    model = Account
    entity_name = "科目"
    keyword_fields = ("code", "name", "description")
    sort_fields = DEFAULT_SORT_FIELDS | {"account_type", "balance"}

    repository: AccountRepository

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AccountRepository(session))
        self.lines = BaseRepository(session, JournalEntryLine)

    @staticmethod
    def account_types() -> list[dict[str, str]]:
        """科目类型列表。"""
        return [{"value": value, "label": ACCOUNT_TYPE_LABELS[value]} for value in ACCOUNT_TYPES]

    @staticmethod
    def _check_type(account_type: str | None) -> None:
        if account_type is not None and account_type not in ACCOUNT_TYPES:
            raise BusinessError("无效的科目类型")

    async def list_accounts(
        self,
        query: ListQuery,
        account_type: str | None = None,
        parent_id: int | None = None,
    ) -> tuple[list[Account], int]:
        self._check_type(account_type)
        return await self.list(query, account_type=account_type, parent_id=parent_id)

    async def get_by_code(self, code: str) -> Account:
        account = await self.repository.get_by_code(code)
        if account is None:
            raise NotFoundError(self.entity_name)
        return account

    async def children(self, id: int) -> list[Account]:
        await self.get(id)
        return await self.repository.children(id)

    async def _load_parent(self, parent_id: int, account_type: str) -> Account:
        parent = await self.repository.get(parent_id)
        if parent is None:
            raise BusinessError("父科目不存在")
        if parent.account_type != account_type:
            raise BusinessError("子科目类型必须与父科目类型一致")
        return parent

    async def _before_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        self._check_type(fields.get("account_type"))
        fields = await super()._before_create(fields)
        if fields.get("parent_id") is not None:
            await self._load_parent(fields["parent_id"], fields["account_type"])
        return fields

    async def _before_update(self, entity: Account, fields: dict[str, Any]) -> dict[str, Any]:
        self._check_type(fields.get("account_type"))
        fields = await super()._before_update(entity, fields)

        parent_id = fields.get("parent_id", entity.parent_id)
        if parent_id is None:
            return fields
        if parent_id == entity.id:
            raise BusinessError("科目不能以自己作为父科目")

        parent = await self._load_parent(parent_id, fields.get("account_type") or entity.account_type)
        # 沿父链向上，遇到自身即构成环
        ancestor_id = parent.parent_id
        while ancestor_id is not None:
            if ancestor_id == entity.id:
                raise BusinessError("不能形成循环引用")
            ancestor = await self.repository.get(ancestor_id)
            ancestor_id = ancestor.parent_id if ancestor else None
        return fields

    async def _before_delete(self, entity: Account) -> None:
        if await self.repository.has_children(entity.id):
            raise BusinessError("存在子科目，无法删除")
        if await self.lines.exists(account_id=entity.id):
            raise BusinessError("科目已被会计分录引用，无法删除")


class JournalEntryService(BaseService):
    """会计分录服务。

    借贷平衡属于跨行规则，由控制器在调用前校验；本服务负责逐行规则、
    科目存在性、合计与编号。
    """

    entity_name = "分录"
    keyword_fields = ("number", "reference", "description")
    sort_fields = frozenset({"id", "number", "entry_date", "total_debit", "created_at"})

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.entries = JournalEntryRepository(session)
        self.accounts = AccountRepository(session)
        self.lines = BaseRepository(session, JournalEntryLine)

    async def get(self, id: int) -> JournalEntry:
        entry = await self.entries.get(id)
        if entry is None:
            raise NotFoundError(self.entity_name)
        return entry

    @log_performance(threshold=0.5)
    async def list(self, query: ListQuery) -> tuple[list[JournalEntry], int]:
        return await self.entries.paginate(
            query,
            keyword_fields=self.keyword_fields,
            sort_fields=self.sort_fields,
            date_field="entry_date",
            status=query.status,
        )

    async def _check_lines(self, lines: list[dict[str, Any]]) -> None:
        for index, line in enumerate(lines, start=1):
            debit = to_decimal(line.get("debit_amount"))
            credit = to_decimal(line.get("credit_amount"))
            if debit == 0 and credit == 0:
                raise BusinessError(f"第{index}行借方和贷方金额不能同时为零")
            if debit > 0 and credit > 0:
                raise BusinessError(f"第{index}行不能同时有借方和贷方金额")

        wanted = {line["account_id"] for line in lines}
        missing = wanted - await self.accounts.existing_ids(wanted)
        if missing:
            raise BusinessError(f"科目ID {min(missing)} 不存在")

    @staticmethod
    def _build_lines(lines: list[dict[str, Any]]) -> list[JournalEntryLine]:
        return [
            JournalEntryLine(
                account_id=line["account_id"],
                debit_amount=line.get("debit_amount") or 0,
                credit_amount=line.get("credit_amount") or 0,
                description=line.get("description"),
            )
            for line in lines
        ]

    @staticmethod
    def _apply_totals(entry: JournalEntry, lines: list[dict[str, Any]]) -> None:
        total_debit, total_credit = line_totals(lines)
        entry.total_debit = float(total_debit)
        entry.total_credit = float(total_credit)

    @transactional
    async def create(
        self,
        fields: dict[str, Any],
        lines: list[dict[str, Any]],
        created_by: int | None = None,
    ) -> JournalEntry:
        await self._check_lines(lines)
        entry = JournalEntry(**fields, created_by=created_by, lines=self._build_lines(lines))
        self._apply_totals(entry, lines)
        entry = await self.entries.add(entry)

        entry.number = f"JE-{entry.entry_date:%Y%m%d}-{entry.id:06d}"
        await self.session.flush()
        self.log.info(f"会计分录已创建: {entry.number}")
        return await self.entries.reload(entry)

    @transactional
    async def update(
        self,
        id: int,
        fields: dict[str, Any],
        lines: list[dict[str, Any]] | None = None,
    ) -> JournalEntry:
        entry = await self.get(id)
        for key, value in fields.items():
            setattr(entry, key, value)
        if lines is not None:
            await self._check_lines(lines)
            removed = await self.lines.delete_where(entry_id=entry.id)
            await self.session.refresh(entry, attribute_names=["lines"])
            self.log.debug(f"替换分录明细: {entry.number} 删除 {removed} 行")
            entry.lines = self._build_lines(lines)
            self._apply_totals(entry, lines)

        await self.session.flush()
        self.log.info(f"会计分录已更新: {entry.number}")
        return await self.entries.reload(entry)

    @transactional
    async def delete(self, id: int) -> None:
        entry = await self.get(id)
        number = entry.number
        await self.entries.delete(entry)
        self.log.info(f"会计分录已删除: {number}")


class PaymentService(BaseService):
    """收付款服务。"""

    entity_name = "付款记录"
    keyword_fields = ("number", "reference", "description")
    sort_fields = frozenset({"id", "number", "payment_date", "amount", "created_at"})

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.payments = PaymentRepository(session)
        self.accounts = AccountRepository(session)

    async def get(self, id: int) -> Payment:
        payment = await self.payments.get(id)
        if payment is None:
            raise NotFoundError(self.entity_name)
        return payment

    @log_performance(threshold=0.5)
    async def list(
        self,
        query: ListQuery,
        payment_type: str | None = None,
        account_id: int | None = None,
    ) -> tuple[list[Payment], int]:
        return await self.payments.paginate(
            query,
            keyword_fields=self.keyword_fields,
            sort_fields=self.sort_fields,
            date_field="payment_date",
            status=query.status,
            payment_type=payment_type,
            account_id=account_id,
        )

    async def _check_account(self, account_id: int | None) -> None:
        if account_id is not None and not await self.accounts.exists(id=account_id):
            raise BusinessError(f"科目ID {account_id} 不存在")

    @transactional
    async def create(self, fields: dict[str, Any]) -> Payment:
        await self._check_account(fields.get("account_id"))
        payment = await self.payments.create({**fields, "status": "pending"})

        payment.number = f"PAY-{payment.payment_date:%Y%m%d}-{payment.id:06d}"
        payment = await self.payments.update(payment, {})
        self.log.info(f"付款记录已创建: {payment.number}")
        return payment

    @transactional
    async def update(self, id: int, fields: dict[str, Any]) -> Payment:
        payment = await self.get(id)
        if payment.status != "pending":
            raise BusinessError("只有待处理的付款记录可以修改")
        await self._check_account(fields.get("account_id"))
        return await self.payments.update(payment, fields)

    @transactional
    async def update_status(self, id: int, status: str) -> Payment:
        payment = await self.get(id)
        if status not in PAYMENT_TRANSITIONS.get(payment.status, frozenset()):
            raise BusinessError("付款状态不允许变更")
        payment = await self.payments.update(payment, {"status": status})
        self.log.info(f"付款记录 {payment.number} 状态变更为 {status}")
        return payment

    @transactional
    async def delete(self, id: int) -> None:
        payment = await self.get(id)
        if payment.status == "completed":
            raise BusinessError("已完成的付款记录不能删除")
        await self.payments.delete(payment)


__all__ = [
    "ACCOUNT_TYPE_LABELS",
    "PAYMENT_TRANSITIONS",
    "AccountService",
    "JournalEntryService",
    "PaymentService",
    "line_totals",
    "to_decimal",
]
