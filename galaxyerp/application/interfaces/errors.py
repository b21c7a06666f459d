"""错误处理系统 - 责任链模式。

提供：
- 应用层异常体系（AppError 及其子类，携带错误种类、代码与 HTTP 状态）
- 错误分类链：把任意异常归类为 ClassifiedError（纯函数，可重复调用）
- 错误传播器：记录带请求上下文的日志并渲染统一的失败响应

分类顺序（首个匹配生效）：
    应用异常 → HTTP 异常 → 结构化校验错误 → 持久化错误 → 请求绑定错误 → 未知错误
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from galaxyerp.common.logging import logger
from galaxyerp.core.exceptions import MissingFilterError

from .egress import ResponseBuilder

VALIDATION_FAILED_MESSAGE = "输入数据验证失败"
BINDING_FAILED_MESSAGE = "请求数据格式错误"
INTERNAL_ERROR_MESSAGE = "服务器内部错误"


class ErrorKind(str, Enum):
    """错误种类。"""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    BUSINESS = "business"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """错误代码枚举（响应体 error 字段）。"""

    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    BUSINESS_ERROR = "BUSINESS_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# 这些种类属于调用方问题，记录为 WARNING；其余记录为 ERROR
_CLIENT_KINDS = frozenset({
    ErrorKind.VALIDATION,
    ErrorKind.AUTHENTICATION,
    ErrorKind.PERMISSION,
    ErrorKind.BUSINESS,
    ErrorKind.NOT_FOUND,
    ErrorKind.CONFLICT,
})


# ==================== 应用层异常 ====================


class AppError(Exception):
    """应用层异常基类。

    服务层与控制器抛出的所有预期错误都应继承此类，分类器会原样使用
    其中的消息、代码、状态码与详情。

    Attributes:
        message: 错误消息（面向调用方）
        kind: 错误种类
        code: 错误代码
        status_code: HTTP状态码
        details: 结构化错误详情
        cause: 底层原因（仅写入日志）
    """

    kind: ErrorKind = ErrorKind.SYSTEM
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status
        self.details = details or {}
        self.cause = cause

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} code={self.code.value} message={self.message}>"


class ValidationError(AppError):
    """输入校验异常。"""

    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.VALIDATION_ERROR
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = VALIDATION_FAILED_MESSAGE


class BadRequestError(AppError):
    """请求参数异常（如路径 ID 格式错误）。"""

    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.BAD_REQUEST
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "请求参数错误"


class UnauthorizedError(AppError):
    """未认证异常。"""

    kind = ErrorKind.AUTHENTICATION
    default_code = ErrorCode.UNAUTHORIZED
    default_status = status.HTTP_401_UNAUTHORIZED
    default_message = "未授权访问"


class ForbiddenError(AppError):
    """无权限异常。"""

    kind = ErrorKind.PERMISSION
    default_code = ErrorCode.FORBIDDEN
    default_status = status.HTTP_403_FORBIDDEN
    default_message = "禁止访问"


class NotFoundError(AppError):
    """资源不存在异常。

    使用示例:
        raise NotFoundError("科目")  # 消息: 科目不存在
    """

    kind = ErrorKind.NOT_FOUND
    default_code = ErrorCode.NOT_FOUND
    default_status = status.HTTP_404_NOT_FOUND
    default_message = "资源不存在"

    def __init__(
        self,
        resource: str | None = None,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.resource = resource
        if message is None and resource:
            message = f"{resource}不存在"
        super().__init__(message, **kwargs)


class ConflictError(AppError):
    """资源冲突异常（如唯一编码已存在）。"""

    kind = ErrorKind.CONFLICT
    default_code = ErrorCode.CONFLICT
    default_status = status.HTTP_409_CONFLICT
    default_message = "资源已存在"


class BusinessError(AppError):
    """业务规则异常。"""

    kind = ErrorKind.BUSINESS
    default_code = ErrorCode.BUSINESS_ERROR
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "业务规则校验失败"


# ==================== 分类结果 ====================


@dataclass(frozen=True)
class ClassifiedError:
    """分类后的错误。

    Attributes:
        kind: 错误种类
        code: 错误代码
        status_code: HTTP状态码
        message: 面向调用方的消息
        details: 结构化详情
        cause: 底层原因（仅写入日志）
        panic: 是否为未预期的异常
    """

    kind: ErrorKind
    code: ErrorCode
    status_code: int
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    cause: str | None = None
    panic: bool = False

    @property
    def log_level(self) -> str:
        return "WARNING" if self.kind in _CLIENT_KINDS and not self.panic else "ERROR"

    def to_response(self) -> JSONResponse:
        """渲染失败响应。

        未预期的异常一律使用 internal_error，不暴露真实原因；
        代码与状态码同常见失败对应时使用 ResponseBuilder 的快捷方法。
        """
        if self.panic:
            return ResponseBuilder.internal_error()
        if (self.code, self.status_code) == (ErrorCode.BAD_REQUEST, status.HTTP_400_BAD_REQUEST):
            return ResponseBuilder.bad_request(self.message, self.details or None)
        shortcut = _RESPONSE_SHORTCUTS.get((self.code, self.status_code))
        if shortcut is not None and not self.details:
            return shortcut(self.message)
        return ResponseBuilder.fail(
            status_code=self.status_code,
            message=self.message,
            code=self.code.value,
            details=self.details or None,
        )


_RESPONSE_SHORTCUTS: dict[tuple[ErrorCode, int], Callable[[str], JSONResponse]] = {
    (ErrorCode.UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED): ResponseBuilder.unauthorized,
    (ErrorCode.FORBIDDEN, status.HTTP_403_FORBIDDEN): ResponseBuilder.forbidden,
    (ErrorCode.NOT_FOUND, status.HTTP_404_NOT_FOUND): ResponseBuilder.not_found,
    (ErrorCode.CONFLICT, status.HTTP_409_CONFLICT): ResponseBuilder.conflict,
    (ErrorCode.NOT_IMPLEMENTED, status.HTTP_501_NOT_IMPLEMENTED): ResponseBuilder.not_implemented,
}


# ==================== 错误分类链 ====================


class ErrorHandler(ABC):
    """错误处理器抽象基类 - 责任链模式。"""

    def __init__(self) -> None:
        self._next_handler: ErrorHandler | None = None

    def set_next(self, handler: ErrorHandler) -> ErrorHandler:
        """设置下一个处理器。

        Returns:
            ErrorHandler: 下一个处理器（支持链式调用）
        """
        self._next_handler = handler
        return handler

    @abstractmethod
    def can_handle(self, exception: BaseException) -> bool:
        """判断是否可以处理该异常。"""

    @abstractmethod
    def classify(self, exception: BaseException) -> ClassifiedError:
        """把异常转换为分类结果。"""

    def process(self, exception: BaseException) -> ClassifiedError:
        """责任链入口。"""
        if self.can_handle(exception):
            return self.classify(exception)

        if self._next_handler:
            return self._next_handler.process(exception)

        return self._default_classify(exception)

    def _default_classify(self, exception: BaseException) -> ClassifiedError:
        """未知异常：一律视为系统错误，不暴露真实原因。"""
        return ClassifiedError(
            kind=ErrorKind.SYSTEM,
            code=ErrorCode.INTERNAL_ERROR,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=INTERNAL_ERROR_MESSAGE,
            cause=f"{type(exception).__name__}: {exception}",
            panic=True,
        )


class AppErrorHandler(ErrorHandler):
    """应用层异常处理器：原样使用异常携带的信息。"""

    def can_handle(self, exception: BaseException) -> bool:
        return isinstance(exception, AppError)

    def classify(self, exception: AppError) -> ClassifiedError:
        return ClassifiedError(
            kind=exception.kind,
            code=exception.code,
            status_code=exception.status_code,
            message=exception.message,
            details=dict(exception.details),
            cause=str(exception.cause) if exception.cause is not None else None,
        )


_HTTP_STATUS_MAPPING: dict[int, tuple[ErrorKind, ErrorCode, str]] = {
    400: (ErrorKind.VALIDATION, ErrorCode.BAD_REQUEST, "请求参数错误"),
    401: (ErrorKind.AUTHENTICATION, ErrorCode.UNAUTHORIZED, "未授权访问"),
    403: (ErrorKind.PERMISSION, ErrorCode.FORBIDDEN, "禁止访问"),
    404: (ErrorKind.NOT_FOUND, ErrorCode.NOT_FOUND, "资源不存在"),
    405: (ErrorKind.VALIDATION, ErrorCode.METHOD_NOT_ALLOWED, "请求方法不允许"),
    409: (ErrorKind.CONFLICT, ErrorCode.CONFLICT, "资源冲突"),
    501: (ErrorKind.SYSTEM, ErrorCode.NOT_IMPLEMENTED, "功能暂未实现"),
}


class HTTPExceptionHandler(ErrorHandler):
    """框架 HTTP 异常处理器（路由不存在、方法不允许等）。"""

    def can_handle(self, exception: BaseException) -> bool:
        return isinstance(exception, StarletteHTTPException)

    def classify(self, exception: StarletteHTTPException) -> ClassifiedError:
        status_code = exception.status_code
        if status_code in _HTTP_STATUS_MAPPING:
            kind, code, default_message = _HTTP_STATUS_MAPPING[status_code]
        elif status_code >= 500:
            kind, code, default_message = ErrorKind.SYSTEM, ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE
        else:
            kind, code, default_message = ErrorKind.VALIDATION, ErrorCode.BAD_REQUEST, "请求错误"

        message = default_message
        if status_code < 500 and isinstance(exception.detail, str) and exception.detail:
            message = exception.detail
        return ClassifiedError(
            kind=kind,
            code=code,
            status_code=status_code,
            message=message,
        )


def _is_json_decode_failure(exception: BaseException) -> bool:
    if isinstance(exception, RequestValidationError):
        return any(error.get("type") == "json_invalid" for error in exception.errors())
    if isinstance(exception, PydanticValidationError):
        return any(error.get("type") == "json_invalid" for error in exception.errors())
    return False


class ValidationErrorHandler(ErrorHandler):
    """结构化校验错误处理器（Pydantic / FastAPI 请求校验）。"""

    def can_handle(self, exception: BaseException) -> bool:
        return (
            isinstance(exception, (PydanticValidationError, RequestValidationError))
            and not _is_json_decode_failure(exception)
        )

    def classify(self, exception: BaseException) -> ClassifiedError:
        from galaxyerp.application.validation.messages import field_errors, translate_errors

        violations = translate_errors(
            exception.errors(),
            strip_location=isinstance(exception, RequestValidationError),
        )
        return ClassifiedError(
            kind=ErrorKind.VALIDATION,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=status.HTTP_400_BAD_REQUEST,
            message=VALIDATION_FAILED_MESSAGE,
            details={"field_errors": field_errors(violations)},
        )


class PersistenceErrorHandler(ErrorHandler):
    """持久化错误处理器。

    把 SQLAlchemy 异常与仓储层哨兵异常映射为固定的状态码与消息，
    数据库的原始错误只写入日志。
    """

    def can_handle(self, exception: BaseException) -> bool:
        return isinstance(exception, (sa_exc.SQLAlchemyError, MissingFilterError))

    def classify(self, exception: BaseException) -> ClassifiedError:
        cause = f"{type(exception).__name__}: {exception}"

        if isinstance(exception, sa_exc.NoResultFound):
            return ClassifiedError(
                kind=ErrorKind.NOT_FOUND,
                code=ErrorCode.NOT_FOUND,
                status_code=status.HTTP_404_NOT_FOUND,
                message="记录不存在",
                cause=cause,
            )
        if isinstance(exception, MissingFilterError):
            return ClassifiedError(
                kind=ErrorKind.VALIDATION,
                code=ErrorCode.BAD_REQUEST,
                status_code=status.HTTP_400_BAD_REQUEST,
                message="缺少查询条件",
                cause=cause,
            )
        if self._is_transaction_error(exception):
            return ClassifiedError(
                kind=ErrorKind.DATABASE,
                code=ErrorCode.DATABASE_ERROR,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message="数据库事务错误",
                cause=cause,
            )
        if isinstance(exception, sa_exc.IntegrityError):
            return ClassifiedError(
                kind=ErrorKind.CONFLICT,
                code=ErrorCode.CONFLICT,
                status_code=status.HTTP_409_CONFLICT,
                message="数据冲突",
                cause=cause,
            )
        if self._is_data_error(exception):
            return ClassifiedError(
                kind=ErrorKind.VALIDATION,
                code=ErrorCode.BAD_REQUEST,
                status_code=status.HTTP_400_BAD_REQUEST,
                message="无效的数据格式",
                cause=cause,
            )
        return ClassifiedError(
            kind=ErrorKind.DATABASE,
            code=ErrorCode.DATABASE_ERROR,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="数据库操作失败",
            cause=cause,
        )

    @staticmethod
    def _is_data_error(exception: BaseException) -> bool:
        # 驱动抛出的 DBAPIError 也是 StatementError 的子类，只有 DataError 属于数据格式
        if isinstance(exception, sa_exc.DataError):
            return True
        return isinstance(exception, sa_exc.StatementError) and not isinstance(exception, sa_exc.DBAPIError)

    @staticmethod
    def _is_transaction_error(exception: BaseException) -> bool:
        if isinstance(exception, (sa_exc.PendingRollbackError, sa_exc.ResourceClosedError)):
            return True
        return (
            type(exception) is sa_exc.InvalidRequestError
            and "transaction" in str(exception).lower()
        )


_BINDING_MARKERS = ("bind", "unmarshal", "invalid character")


class BindingErrorHandler(ErrorHandler):
    """请求绑定错误处理器（请求体不是合法 JSON 等）。"""

    def can_handle(self, exception: BaseException) -> bool:
        if isinstance(exception, (json.JSONDecodeError, UnicodeDecodeError)):
            return True
        if _is_json_decode_failure(exception):
            return True
        text = str(exception).lower()
        return any(marker in text for marker in _BINDING_MARKERS)

    def classify(self, exception: BaseException) -> ClassifiedError:
        return ClassifiedError(
            kind=ErrorKind.VALIDATION,
            code=ErrorCode.BAD_REQUEST,
            status_code=status.HTTP_400_BAD_REQUEST,
            message=BINDING_FAILED_MESSAGE,
            details={"error": self._raw_text(exception)},
        )

    @staticmethod
    def _raw_text(exception: BaseException) -> str:
        if isinstance(exception, (RequestValidationError, PydanticValidationError)):
            for error in exception.errors():
                if error.get("type") == "json_invalid":
                    ctx = error.get("ctx") or {}
                    return str(ctx.get("error") or error.get("msg"))
        return str(exception)


class ErrorClassifier:
    """错误分类器。

    按优先级构建处理链，classify 是纯函数：同一个异常多次分类结果一致。
    """

    def __init__(self) -> None:
        self._chain = self._build_chain()

    def _build_chain(self) -> ErrorHandler:
        app_handler = AppErrorHandler()
        (
            app_handler
            .set_next(HTTPExceptionHandler())
            .set_next(ValidationErrorHandler())
            .set_next(PersistenceErrorHandler())
            .set_next(BindingErrorHandler())
        )
        return app_handler

    def classify(self, exception: BaseException) -> ClassifiedError:
        return self._chain.process(exception)


# ==================== 错误传播 ====================


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
        "request_id": getattr(request.state, "request_id", None) or "-",
    }


class ErrorPropagator:
    """错误传播器：分类、记录日志并渲染失败响应。

    使用示例:
        propagator = ErrorPropagator()
        app.add_exception_handler(AppError, propagator.exception_handler)
    """

    def __init__(self, classifier: ErrorClassifier | None = None) -> None:
        self.classifier = classifier or ErrorClassifier()

    def log(self, request: Request, classified: ClassifiedError, exception: BaseException) -> None:
        context = _request_context(request)
        context["error"] = str(exception)
        context["kind"] = classified.kind.value
        if isinstance(exception, AppError):
            context["error_code"] = classified.code.value
            context["status_code"] = classified.status_code
            context["details"] = classified.details
            context["cause"] = classified.cause

        bound = logger.bind(**context)
        summary = (
            f"请求处理失败: {context['method']} {context['path']} | "
            f"{classified.status_code} {classified.message} | "
            f"Request-ID: {context['request_id']}"
        )
        if classified.panic:
            bound.opt(exception=exception).error(f"未处理的异常 | {summary} | {classified.cause}")
        elif classified.cause and classified.log_level == "ERROR":
            bound.error(f"{summary} | 原因: {classified.cause}")
        else:
            bound.log(classified.log_level, summary)

    def handle(self, request: Request, exception: BaseException) -> JSONResponse:
        classified = self.classifier.classify(exception)
        self.log(request, classified, exception)
        return classified.to_response()

    async def exception_handler(self, request: Request, exception: Exception) -> JSONResponse:
        """FastAPI 异常处理器入口。"""
        return self.handle(request, exception)


__all__ = [
    "AppError",
    "AppErrorHandler",
    "BadRequestError",
    "BindingErrorHandler",
    "BusinessError",
    "ClassifiedError",
    "ConflictError",
    "ErrorClassifier",
    "ErrorCode",
    "ErrorHandler",
    "ErrorKind",
    "ErrorPropagator",
    "ForbiddenError",
    "HTTPExceptionHandler",
    "NotFoundError",
    "PersistenceErrorHandler",
    "UnauthorizedError",
    "ValidationError",
    "ValidationErrorHandler",
]
