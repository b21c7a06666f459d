"""数据库事务管理工具。

提供两种事务管理方式：
1. @transactional - 服务方法装饰器，使用 self.session 或 session 参数
2. transactional_context - 上下文管理器
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from functools import wraps

from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.common.logging import logger


@asynccontextmanager
async def transactional_context(session: AsyncSession) -> AsyncGenerator[AsyncSession]:
    """事务上下文管理器，成功时提交，异常时回滚。

    用法:
        async with transactional_context(session):
            await repo1.create(...)
            await repo2.update(...)
    """
    try:
        yield session
        await session.commit()
        logger.debug("事务提交成功")
    except Exception as exc:
        await session.rollback()
        logger.debug(f"事务回滚: {type(exc).__name__}: {exc}")
        raise


def _find_session(args: tuple, kwargs: dict) -> AsyncSession | None:
    if isinstance(kwargs.get("session"), AsyncSession):
        return kwargs["session"]
    for arg in args:
        if isinstance(arg, AsyncSession):
            return arg
    if args and isinstance(getattr(args[0], "session", None), AsyncSession):
        return args[0].session
    return None


def transactional[T](func: Callable[..., T]) -> Callable[..., T]:
    """事务装饰器。

    从 session 参数或 self.session 获取会话；外层已由 @transactional 管理的
    调用不会重复提交。

    用法示例:
        class AccountService(BaseService):
            @transactional
            async def create_account(self, fields: dict) -> Account:
                ...
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        session = _find_session(args, kwargs)
        if session is None:
            raise ValueError(
                f"无法找到session参数。请确保函数 {func.__name__} 有一个 'session' 参数，"
                "或者类有 'session' 属性。"
            )

        if session.info.get("transactional"):
            return await func(*args, **kwargs)

        session.info["transactional"] = True
        try:
            async with transactional_context(session):
                return await func(*args, **kwargs)
        finally:
            session.info.pop("transactional", None)

    return wrapper


__all__ = [
    "transactional",
    "transactional_context",
]
