"""认证服务：注册、登录、个人资料与修改密码。"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from galaxyerp.application.interfaces.errors import (
    BusinessError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from galaxyerp.core.transaction import transactional
from galaxyerp.domain.models import User
from galaxyerp.repositories import UserRepository
from galaxyerp.utils.jwt import TokenService
from galaxyerp.utils.security import PasswordHasher

from .base import BaseService

INVALID_CREDENTIALS_MESSAGE = "用户名或密码错误"


class AuthResult:
    """认证结果：用户与签发的访问令牌。"""

    __slots__ = ("expires_at", "token", "user")

    def __init__(self, user: User, token: str, expires_at: datetime) -> None:
        self.user = user
        self.token = token
        self.expires_at = expires_at

    def __repr__(self) -> str:
        return f"<AuthResult user={self.user.username}>"


class AuthService(BaseService):
    """认证服务。

    bcrypt 计算在线程池中执行，不阻塞事件循环。
    """

    def __init__(
        self,
        session: AsyncSession,
        hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.hasher = hasher
        self.token_service = token_service

    def _issue(self, user: User) -> AuthResult:
        token, expires_at = self.token_service.issue(user.id, user.username)
        return AuthResult(user, token, expires_at)

    @transactional
    async def register(self, fields: dict[str, Any]) -> AuthResult:
        """注册新用户并签发令牌。

        Raises:
            ConflictError: 邮箱或用户名已被占用
        """
        fields = dict(fields)
        fields["email"] = fields["email"].lower()
        if await self.users.exists(email=fields["email"]):
            raise ConflictError("邮箱已被注册")
        if await self.users.exists(username=fields["username"]):
            raise ConflictError("用户名已被使用")

        password = fields.pop("password")
        fields["password_hash"] = await run_in_threadpool(self.hasher.hash, password)
        user = await self.users.create(fields)
        self.log.info(f"用户注册成功: {user.username}")
        return self._issue(user)

    @transactional
    async def login(self, login: str, password: str) -> AuthResult:
        """用户名或邮箱登录。

        Raises:
            UnauthorizedError: 用户不存在或密码错误（不区分两者）
            ForbiddenError: 账户已被禁用
        """
        user = await self.users.get_by_login(login)
        if user is None or not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            self.log.warning(f"登录失败: {login}")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        if not user.is_active:
            raise ForbiddenError("用户账户已被禁用")

        user = await self.users.update(user, {"last_login_at": datetime.now(UTC)})
        self.log.info(f"用户登录成功: {user.username}")
        return self._issue(user)

    async def profile(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFoundError("用户")
        return user

    @transactional
    async def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        user = await self.profile(user_id)
        if not await run_in_threadpool(self.hasher.verify, old_password, user.password_hash):
            raise BusinessError("旧密码错误")

        password_hash = await run_in_threadpool(self.hasher.hash, new_password)
        await self.users.update(user, {"password_hash": password_hash})
        self.log.info(f"用户修改密码: {user.username}")


__all__ = [
    "INVALID_CREDENTIALS_MESSAGE",
    "AuthResult",
    "AuthService",
]
