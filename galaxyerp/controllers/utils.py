"""控制器公共工具：路径参数解析、请求体绑定校验与依赖注入。"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.application.interfaces.errors import (
    BINDING_FAILED_MESSAGE,
    BadRequestError,
    UnauthorizedError,
)
from galaxyerp.application.validation import Validator
from galaxyerp.application.validation.types import MAX_ID
from galaxyerp.application.middleware.auth import MISSING_TOKEN_MESSAGE
from galaxyerp.services import AuthService, BaseService
from galaxyerp.utils.jwt import Principal

INVALID_ID_MESSAGE = "ID格式错误"


def parse_id(raw: str) -> int:
    """解析路径中的 ID，必须是不超过 MAX_ID 的正整数。

    Raises:
        BadRequestError: 格式错误
    """
    if not (raw.isascii() and raw.isdigit()) or len(raw) > len(str(MAX_ID)):
        raise BadRequestError(INVALID_ID_MESSAGE)
    value = int(raw)
    if not 0 < value <= MAX_ID:
        raise BadRequestError(INVALID_ID_MESSAGE)
    return value


async def bind_and_validate[T](request: Request, model_cls: type[T], validator: Validator) -> T:
    """读取 JSON 请求体并校验。

    JSON 解析失败原样抛出，由错误分类器归为数据格式错误；
    请求体不是对象时同样视为格式错误；字段违规抛出 ViolationError。
    """
    payload = await request.json()
    if not isinstance(payload, dict):
        raise BadRequestError(
            BINDING_FAILED_MESSAGE,
            details={"error": f"cannot bind {type(payload).__name__} into {model_cls.__name__}"},
        )
    return validator.validate_or_raise(model_cls, payload)


def get_validator(request: Request) -> Validator:
    return request.app.state.validator


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """每个请求一个数据库会话。"""
    async with request.app.state.database.session() as session:
        yield session


def current_principal(request: Request) -> Principal:
    """认证中间件放入的当前用户。"""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise UnauthorizedError(MISSING_TOKEN_MESSAGE)
    return principal


def provide(service_cls: type[BaseService]) -> Callable:
    """按会话构造服务的依赖工厂。

    使用示例:
        service: AccountService = Depends(provide(AccountService))
    """

    def dependency(session: AsyncSession = Depends(get_session)):
        return service_cls(session)

    return dependency


def get_auth_service(request: Request, session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(
        session,
        hasher=request.app.state.password_hasher,
        token_service=request.app.state.token_service,
    )


__all__ = [
    "INVALID_ID_MESSAGE",
    "bind_and_validate",
    "current_principal",
    "get_auth_service",
    "get_session",
    "get_validator",
    "parse_id",
    "provide",
]
