"""HTTP 请求日志中间件。

每个请求分配一个请求 ID（同时作为链路追踪 ID）：优先取请求头
X-Trace-ID / X-Request-ID，缺省时生成 uuid4；写入 request.state.request_id
并在响应头中回传。
"""

from __future__ import annotations

import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from galaxyerp.common.logging import set_trace_id

REQUEST_ID_HEADER = "X-Request-ID"
TRACE_ID_HEADER = "X-Trace-ID"
SLOW_REQUEST_SECONDS = 1.0


def _status_level(status_code: int) -> str:
    if status_code >= 500:
        return "ERROR"
    if status_code >= 400:
        return "WARNING"
    return "INFO"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """请求日志中间件。

    请求进入时记录方法、路径、客户端与 User-Agent；完成时按状态码选择级别
    记录状态与耗时，超过 SLOW_REQUEST_SECONDS 另记一条慢请求警告。
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = (
            request.headers.get(TRACE_ID_HEADER)
            or request.headers.get(REQUEST_ID_HEADER)
            or str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_trace_id(request_id)

        route = f"{request.method} {request.url.path}"
        client = request.client.host if request.client else "unknown"
        logger.info(f"→ {route} | 客户端: {client} | User-Agent: {request.headers.get('user-agent', 'unknown')[:50]}")
        if request.query_params:
            logger.debug(f"  查询参数: {dict(request.query_params)}")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(f"✗ {route} | {type(exc).__name__}: {exc} | 耗时: {time.perf_counter() - started:.3f}s")
            raise
        elapsed = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[TRACE_ID_HEADER] = request_id
        logger.log(
            _status_level(response.status_code),
            f"← {route} | 状态: {response.status_code} | 耗时: {elapsed:.3f}s",
        )
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning(f"慢请求: {route} | 耗时: {elapsed:.3f}s (超过{SLOW_REQUEST_SECONDS:.0f}秒)")

        return response


__all__ = [
    "REQUEST_ID_HEADER",
    "TRACE_ID_HEADER",
    "RequestLoggingMiddleware",
]
