"""默认组件实现。"""

from __future__ import annotations

from typing import ClassVar

from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from galaxyerp.application.app.base import Component, ErpApplication
from galaxyerp.application.config import AppConfig
from galaxyerp.application.constants import ComponentName
from galaxyerp.application.interfaces.errors import AppError
from galaxyerp.application.middleware import (
    AuthenticationMiddleware,
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
)
from galaxyerp.common.logging import logger
from galaxyerp.core.database import DatabaseManager


class CORSComponent(Component):
    """CORS 中间件组件。"""

    name = ComponentName.CORS
    enabled = True
    depends_on: ClassVar[list[str]] = []

    def can_enable(self, config: AppConfig) -> bool:
        """仅当配置了 origins 时启用。"""
        return self.enabled and bool(config.cors.origins)

    def install(self, app: ErpApplication, config: AppConfig) -> None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors.origins,
            allow_credentials=config.cors.allow_credentials,
            allow_methods=config.cors.allow_methods,
            allow_headers=config.cors.allow_headers,
        )
        logger.debug("CORS 中间件已启用")

    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """无需初始化。"""

    async def teardown(self, app: ErpApplication) -> None:
        """无需清理。"""


class RequestLoggingComponent(Component):
    """请求日志中间件组件。"""

    name = ComponentName.REQUEST_LOGGING
    enabled = True
    depends_on: ClassVar[list[str]] = []

    def install(self, app: ErpApplication, config: AppConfig) -> None:
        app.add_middleware(RequestLoggingMiddleware)
        logger.debug("请求日志中间件已启用")

    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """无需初始化。"""

    async def teardown(self, app: ErpApplication) -> None:
        """无需清理。"""


class ErrorHandlingComponent(Component):
    """错误处理组件。

    同一个错误传播器既注册为 FastAPI 异常处理器（AppError、请求校验异常、
    HTTPException），也作为兜底中间件捕获其余所有异常。
    """

    name = ComponentName.ERROR_HANDLING
    enabled = True
    depends_on: ClassVar[list[str]] = []

    def install(self, app: ErpApplication, config: AppConfig) -> None:
        propagator = app.state.error_propagator
        app.add_exception_handler(AppError, propagator.exception_handler)
        app.add_exception_handler(RequestValidationError, propagator.exception_handler)
        app.add_exception_handler(StarletteHTTPException, propagator.exception_handler)
        app.add_middleware(ErrorHandlingMiddleware, propagator=propagator)
        logger.debug("错误处理已启用")

    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """无需初始化。"""

    async def teardown(self, app: ErpApplication) -> None:
        """无需清理。"""


class AuthenticationComponent(Component):
    """认证中间件组件。"""

    name = ComponentName.AUTHENTICATION
    enabled = True
    depends_on: ClassVar[list[str]] = []

    def install(self, app: ErpApplication, config: AppConfig) -> None:
        app.add_middleware(AuthenticationMiddleware, token_service=app.state.token_service)
        logger.debug("认证中间件已启用")

    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """无需初始化。"""

    async def teardown(self, app: ErpApplication) -> None:
        """无需清理。"""


class DatabaseComponent(Component):
    """数据库组件。"""

    name = ComponentName.DATABASE
    enabled = True
    depends_on: ClassVar[list[str]] = []

    def can_enable(self, config: AppConfig) -> bool:
        """仅当配置了数据库 URL 时启用。"""
        return self.enabled and bool(config.database.url)

    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """初始化数据库，按配置自动建表。"""
        database: DatabaseManager = app.state.database
        if not database.initialized:
            await database.initialize(
                url=config.database.url,
                echo=config.database.echo,
                pool_size=config.database.pool_size,
                max_overflow=config.database.max_overflow,
                pool_timeout=config.database.pool_timeout,
                pool_recycle=config.database.pool_recycle,
            )
        if config.database.auto_create:
            await database.create_all()

    async def teardown(self, app: ErpApplication) -> None:
        """关闭数据库。"""
        database: DatabaseManager = app.state.database
        if database.initialized:
            await database.cleanup()


__all__ = [
    "AuthenticationComponent",
    "CORSComponent",
    "DatabaseComponent",
    "ErrorHandlingComponent",
    "RequestLoggingComponent",
]
