"""错误恢复中间件。

捕获下游未被异常处理器处理的任何异常，交给错误传播器分类、记录并渲染，
保证单个请求的崩溃不会影响进程。
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from galaxyerp.application.interfaces.errors import ErrorPropagator


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """错误恢复中间件。"""

    def __init__(self, app: ASGIApp, propagator: ErrorPropagator) -> None:
        super().__init__(app)
        self.propagator = propagator

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.propagator.handle(request, exc)


__all__ = [
    "ErrorHandlingMiddleware",
]
