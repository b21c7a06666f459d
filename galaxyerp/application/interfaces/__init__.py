"""接口层：入站解析、出站响应与错误处理。"""

from .egress import Pagination, ResponseBuilder, ResponseEnvelope
from .errors import (
    AppError,
    BadRequestError,
    BusinessError,
    ClassifiedError,
    ConflictError,
    ErrorClassifier,
    ErrorCode,
    ErrorKind,
    ErrorPropagator,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from .ingress import ListQuery, SortOrder, build_pagination, list_query, parse_list_query

__all__ = [
    "AppError",
    "BadRequestError",
    "BusinessError",
    "ClassifiedError",
    "ConflictError",
    "ErrorClassifier",
    "ErrorCode",
    "ErrorKind",
    "ErrorPropagator",
    "ForbiddenError",
    "ListQuery",
    "NotFoundError",
    "Pagination",
    "ResponseBuilder",
    "ResponseEnvelope",
    "SortOrder",
    "UnauthorizedError",
    "ValidationError",
    "build_pagination",
    "list_query",
    "parse_list_query",
]
