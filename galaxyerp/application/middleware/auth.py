"""认证中间件。

在 /api/ 路由前校验 Bearer JWT，成功后把只读的 Principal 放入
request.state.principal；失败时直接返回 401，不调用后续处理器。
"""

from __future__ import annotations

from collections.abc import Iterable

from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from galaxyerp.utils.jwt import InvalidTokenError, TokenService

PROTECTED_PREFIX = "/api/"
BEARER_PREFIX = "Bearer "

PUBLIC_PATHS = frozenset({
    "/health",
    "/api/v1",
    "/api/v1/auth/login",
    "/api/v1/auth/register",
    "/api/v1/auth/refresh",
    "/api/v1/auth/logout",
})

MISSING_TOKEN_MESSAGE = "未提供认证令牌"
INVALID_TOKEN_MESSAGE = "无效的认证令牌"


def _unauthorized(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"success": False, "message": message},
    )


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """JWT 认证中间件。

    使用示例:
        app.add_middleware(AuthenticationMiddleware, token_service=token_service)
    """

    def __init__(
        self,
        app: ASGIApp,
        token_service: TokenService,
        public_paths: Iterable[str] = PUBLIC_PATHS,
    ) -> None:
        super().__init__(app)
        self.token_service = token_service
        self.public_paths = frozenset(public_paths)

    def is_public(self, path: str) -> bool:
        normalized = path.rstrip("/") or "/"
        return normalized in self.public_paths or not path.startswith(PROTECTED_PREFIX)

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS" or self.is_public(request.url.path):
            return await call_next(request)

        header = request.headers.get("authorization")
        if not header or not header.startswith(BEARER_PREFIX):
            logger.warning(f"认证失败: 缺少令牌 | {request.method} {request.url.path}")
            return _unauthorized(MISSING_TOKEN_MESSAGE)

        token = header[len(BEARER_PREFIX):].strip()
        try:
            principal = self.token_service.decode(token)
        except InvalidTokenError as exc:
            logger.warning(f"认证失败: {exc} | {request.method} {request.url.path}")
            return _unauthorized(INVALID_TOKEN_MESSAGE)

        request.state.principal = principal
        return await call_next(request)


__all__ = [
    "INVALID_TOKEN_MESSAGE",
    "MISSING_TOKEN_MESSAGE",
    "PUBLIC_PATHS",
    "AuthenticationMiddleware",
]
