"""认证控制器。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from galaxyerp.application.interfaces.egress import ResponseBuilder
from galaxyerp.application.validation import Validator
from galaxyerp.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    register_fields,
    to_token_response,
    to_user_response,
)
from galaxyerp.services import AuthService
from galaxyerp.utils.jwt import Principal

from .utils import bind_and_validate, current_principal, get_auth_service, get_validator

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
async def register(
    request: Request,
    service: AuthService = Depends(get_auth_service),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, RegisterRequest, validator)
    result = await service.register(register_fields(payload))
    return ResponseBuilder.created(to_token_response(result), "注册成功")


@router.post("/login")
async def login(
    request: Request,
    service: AuthService = Depends(get_auth_service),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, LoginRequest, validator)
    result = await service.login(payload.username, payload.password)
    return ResponseBuilder.ok(to_token_response(result), "登录成功")


@router.get("/me")
async def me(
    principal: Principal = Depends(current_principal),
    service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    user = await service.profile(principal.subject_id)
    return ResponseBuilder.ok(to_user_response(user), "获取成功")


@router.post("/change-password")
async def change_password(
    request: Request,
    principal: Principal = Depends(current_principal),
    service: AuthService = Depends(get_auth_service),
    validator: Validator = Depends(get_validator),
) -> JSONResponse:
    payload = await bind_and_validate(request, ChangePasswordRequest, validator)
    await service.change_password(principal.subject_id, payload.old_password, payload.new_password)
    return ResponseBuilder.ok(message="密码修改成功")


@router.post("/logout")
async def logout() -> JSONResponse:
    # 令牌无状态，客户端丢弃即可
    return ResponseBuilder.ok(message="已登出")


@router.post("/refresh")
async def refresh() -> JSONResponse:
    return ResponseBuilder.not_implemented()


__all__ = ["router"]
