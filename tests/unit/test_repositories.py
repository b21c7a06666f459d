"""Unit tests for repository bulk operations."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import pytest

from galaxyerp.core.database import DatabaseManager
from galaxyerp.core.exceptions import MissingFilterError
from galaxyerp.domain.models import Account
from galaxyerp.repositories import AccountRepository


def _run[T](scenario: Callable[[AccountRepository], Awaitable[T]]) -> T:
    async def main() -> T:
        database = DatabaseManager()
        await database.initialize("sqlite+aiosqlite:///:memory:")
        await database.create_all()
        try:
            async with database.session() as session:
                repository = AccountRepository(session)
                for code, account_type in (("1001", "asset"), ("1002", "asset"), ("2001", "liability")):
                    await repository.add(Account(code=code, name=code, account_type=account_type))
                return await scenario(repository)
        finally:
            await database.cleanup()

    return asyncio.run(main())


def test_delete_where_removes_matching_rows() -> None:
    async def scenario(repository: AccountRepository) -> tuple[int, int]:
        removed = await repository.delete_where(account_type="asset")
        return removed, await repository.count()

    assert _run(scenario) == (2, 1)


@pytest.mark.parametrize("filters", [{}, {"account_type": None}, {"no_such_column": "x"}])
def test_delete_where_without_filters_is_refused(filters: dict) -> None:
    async def scenario(repository: AccountRepository) -> int:
        with pytest.raises(MissingFilterError):
            await repository.delete_where(**filters)
        return await repository.count()

    assert _run(scenario) == 3
