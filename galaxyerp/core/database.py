"""数据库管理器。

提供统一的数据库连接管理、会话创建和健康检查功能。
每个应用实例持有自己的 DatabaseManager（放在 app.state.database），不使用单例。
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from galaxyerp.common.logging import logger
from galaxyerp.core.models import Base


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return _is_sqlite(url) and (":memory:" in url or url.rstrip("/").endswith(":"))


class DatabaseManager:
    """数据库管理器。

    职责：
    1. 管理数据库引擎和连接池
    2. 提供会话工厂
    3. 健康检查
    4. 生命周期管理

    使用示例:
        database = DatabaseManager()
        await database.initialize("sqlite+aiosqlite:///./galaxyerp.db")

        async with database.session() as session:
            ...

        await database.cleanup()
    """

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def engine(self) -> AsyncEngine:
        """获取数据库引擎。"""
        if self._engine is None:
            raise RuntimeError("数据库管理器未初始化，请先调用 initialize()")
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """获取会话工厂。"""
        if self._session_factory is None:
            raise RuntimeError("数据库管理器未初始化，请先调用 initialize()")
        return self._session_factory

    async def initialize(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
    ) -> None:
        """初始化数据库连接。

        Args:
            url: 数据库连接字符串
            echo: 是否打印SQL语句
            pool_size: 连接池大小（SQLite 忽略）
            max_overflow: 最大溢出连接数（SQLite 忽略）
            pool_timeout: 连接超时时间（秒）
            pool_recycle: 连接回收时间（秒）
        """
        if self._initialized:
            logger.warning("数据库管理器已初始化，跳过重复初始化")
            return

        engine_kwargs: dict[str, Any] = {"echo": echo}
        if _is_sqlite(url):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(url):
                # 内存库必须共享同一个连接
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                pool_pre_ping=True,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self._engine = create_async_engine(url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            expire_on_commit=False,
            autoflush=False,
            class_=AsyncSession,
        )

        if not await self.health_check():
            raise RuntimeError("数据库连接失败")

        self._initialized = True
        logger.info("数据库管理器初始化完成")

    async def create_all(self) -> None:
        """按模型定义创建所有表（已存在的表跳过）。"""
        # 确保所有模型都已注册到元数据
        import galaxyerp.domain.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("数据表已创建")

    async def health_check(self) -> bool:
        """健康检查。

        Returns:
            bool: 连接是否正常
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("数据库健康检查通过")
            return True
        except (SQLAlchemyError, OSError) as exc:
            logger.error(f"数据库健康检查失败: {exc}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """获取数据库会话（上下文管理器）。

        异常时回滚，结束时总是关闭会话。
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as exc:
            await session.rollback()
            if isinstance(exc, SQLAlchemyError):
                logger.error(f"数据库会话异常: {type(exc).__name__}: {exc}")
            raise
        finally:
            await session.close()

    async def cleanup(self) -> None:
        """清理资源，关闭所有连接。"""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("数据库连接已关闭")

        self._engine = None
        self._session_factory = None
        self._initialized = False

    def __repr__(self) -> str:
        status = "initialized" if self._initialized else "not initialized"
        return f"<DatabaseManager status={status}>"


__all__ = [
    "DatabaseManager",
]
