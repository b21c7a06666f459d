"""认证与用户模型。"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from galaxyerp.application.validation.types import Email, Phone, StrongPassword
from galaxyerp.domain.models import User
from galaxyerp.services.auth import AuthResult

from .common import RequestModel, ResponseModel


class RegisterRequest(RequestModel):
    username: str = Field(..., min_length=3, max_length=50, description="用户名")
    email: Email = Field(..., description="邮箱")
    password: StrongPassword = Field(..., description="密码")
    first_name: str = Field(default="", max_length=50, description="名")
    last_name: str = Field(default="", max_length=50, description="姓")
    phone: Phone | None = Field(default=None, description="手机号")


class LoginRequest(RequestModel):
    username: str = Field(..., min_length=1, max_length=100, description="用户名或邮箱")
    password: str = Field(..., min_length=1, description="密码")


class ChangePasswordRequest(RequestModel):
    old_password: str = Field(..., min_length=1, description="旧密码")
    new_password: StrongPassword = Field(..., description="新密码")


class UserResponse(ResponseModel):
    username: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    is_active: bool
    last_login_at: datetime | None = None


class TokenResponse(BaseModel):
    token: str
    token_type: str = "Bearer"
    expires_at: datetime
    user: UserResponse


def register_fields(request: RegisterRequest) -> dict:
    return {
        "username": request.username,
        "email": request.email,
        "password": request.password,
        "first_name": request.first_name,
        "last_name": request.last_name,
        "phone": request.phone,
    }


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        is_active=user.is_active,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_token_response(result: AuthResult) -> TokenResponse:
    return TokenResponse(
        token=result.token,
        expires_at=result.expires_at,
        user=to_user_response(result.user),
    )


__all__ = [
    "ChangePasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "register_fields",
    "to_token_response",
    "to_user_response",
]
