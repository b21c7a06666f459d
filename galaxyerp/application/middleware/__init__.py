"""HTTP 中间件。"""

from .auth import AuthenticationMiddleware
from .logging import RequestLoggingMiddleware
from .recovery import ErrorHandlingMiddleware

__all__ = [
    "AuthenticationMiddleware",
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
]
