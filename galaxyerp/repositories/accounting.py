"""会计仓储。"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.domain.models import Account, JournalEntry, Payment

from .base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """科目仓储。"""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Account)

    async def get_by_code(self, code: str) -> Account | None:
        return await self.get_by(code=code)

    async def children(self, parent_id: int) -> list[Account]:
        query = select(Account).where(Account.parent_id == parent_id).order_by(Account.code)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def has_children(self, account_id: int) -> bool:
        return await self.exists(parent_id=account_id)

    async def existing_ids(self, ids: set[int]) -> set[int]:
        """返回 ids 中实际存在的科目ID。"""
        if not ids:
            return set()
        result = await self.session.execute(select(Account.id).where(Account.id.in_(ids)))
        return set(result.scalars().all())


class JournalEntryRepository(BaseRepository[JournalEntry]):
    """会计分录仓储（明细行随分录一起加载）。"""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JournalEntry)

    async def reload(self, entry: JournalEntry) -> JournalEntry:
        """重新加载分录及其明细行（包含科目）。"""
        query = (
            select(JournalEntry)
            .where(JournalEntry.id == entry.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one()


class PaymentRepository(BaseRepository[Payment]):
    """收付款仓储。"""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)


__all__ = [
    "AccountRepository",
    "JournalEntryRepository",
    "PaymentRepository",
]
