"""出站响应模型与响应构建器。

所有 HTTP 响应统一为同一种信封结构：

    {"success": bool, "message": str?, "data": any?, "error": str?,
     "details": dict?, "meta": Pagination?}

值为 None 的字段不会出现在响应体中。
"""

from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """分页描述。

    Attributes:
        page: 当前页码（从1开始）
        page_size: 每页数量
        total: 总记录数
        total_pages: 总页数
        has_next: 是否有下一页
        has_prev: 是否有上一页
    """

    page: int = Field(..., ge=1, description="当前页码")
    page_size: int = Field(..., ge=1, le=100, description="每页数量")
    total: int = Field(..., ge=0, description="总记录数")
    total_pages: int = Field(..., ge=0, description="总页数")
    has_next: bool = Field(default=False, description="是否有下一页")
    has_prev: bool = Field(default=False, description="是否有上一页")

    @classmethod
    def create(cls, page: int, page_size: int, total: int) -> Pagination:
        """根据页码、页大小与总数计算分页描述。"""
        total_pages = (total + page_size - 1) // page_size if page_size > 0 else 0
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class ResponseEnvelope(BaseModel):
    """统一响应信封。"""

    success: bool = Field(..., description="是否成功")
    message: str | None = Field(default=None, description="响应消息")
    data: Any | None = Field(default=None, description="响应数据")
    error: str | None = Field(default=None, description="错误代码")
    details: dict[str, Any] | None = Field(default=None, description="错误详情")
    meta: Pagination | None = Field(default=None, description="分页信息")

    def to_content(self) -> dict[str, Any]:
        """序列化为响应体（省略空字段）。"""
        return self.model_dump(mode="json", exclude_none=True)


class ResponseBuilder:
    """响应构建器。

    每一类响应对应一个构造方法，失败响应永远不携带 data。

    使用示例:
        return ResponseBuilder.created(to_account_response(account), "科目创建成功")
        return ResponseBuilder.paginated(items, pagination)
    """

    @staticmethod
    def build(
        status_code: int,
        *,
        success: bool,
        message: str | None = None,
        data: Any | None = None,
        error: str | None = None,
        details: dict[str, Any] | None = None,
        meta: Pagination | None = None,
    ) -> JSONResponse:
        envelope = ResponseEnvelope(
            success=success,
            message=message,
            data=data,
            error=error,
            details=details,
            meta=meta,
        )
        return JSONResponse(status_code=status_code, content=envelope.to_content())

    # ==================== 成功响应 ====================

    @classmethod
    def ok(cls, data: Any | None = None, message: str = "操作成功") -> JSONResponse:
        return cls.build(status.HTTP_200_OK, success=True, message=message, data=data)

    @classmethod
    def created(cls, data: Any | None = None, message: str = "创建成功") -> JSONResponse:
        return cls.build(status.HTTP_201_CREATED, success=True, message=message, data=data)

    @classmethod
    def updated(cls, data: Any | None = None, message: str = "更新成功") -> JSONResponse:
        return cls.build(status.HTTP_200_OK, success=True, message=message, data=data)

    @classmethod
    def deleted(cls, message: str = "删除成功") -> JSONResponse:
        return cls.build(status.HTTP_200_OK, success=True, message=message)

    @classmethod
    def paginated(
        cls,
        data: list[Any],
        pagination: Pagination,
        message: str = "获取成功",
    ) -> JSONResponse:
        """分页列表响应，data 为当前页数据，meta 为分页描述。"""
        return cls.build(
            status.HTTP_200_OK,
            success=True,
            message=message,
            data=data,
            meta=pagination,
        )

    # ==================== 失败响应 ====================

    @classmethod
    def fail(
        cls,
        status_code: int,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> JSONResponse:
        """通用失败响应。"""
        return cls.build(
            status_code,
            success=False,
            message=message,
            error=code,
            details=details or None,
        )

    @classmethod
    def bad_request(
        cls,
        message: str = "请求参数错误",
        details: dict[str, Any] | None = None,
    ) -> JSONResponse:
        return cls.fail(status.HTTP_400_BAD_REQUEST, message, "BAD_REQUEST", details)

    @classmethod
    def unauthorized(cls, message: str = "未授权访问") -> JSONResponse:
        return cls.fail(status.HTTP_401_UNAUTHORIZED, message, "UNAUTHORIZED")

    @classmethod
    def forbidden(cls, message: str = "禁止访问") -> JSONResponse:
        return cls.fail(status.HTTP_403_FORBIDDEN, message, "FORBIDDEN")

    @classmethod
    def not_found(cls, message: str = "资源不存在") -> JSONResponse:
        return cls.fail(status.HTTP_404_NOT_FOUND, message, "NOT_FOUND")

    @classmethod
    def conflict(cls, message: str = "资源冲突") -> JSONResponse:
        return cls.fail(status.HTTP_409_CONFLICT, message, "CONFLICT")

    @classmethod
    def not_implemented(cls, message: str = "功能暂未实现") -> JSONResponse:
        return cls.fail(status.HTTP_501_NOT_IMPLEMENTED, message, "NOT_IMPLEMENTED")

    @classmethod
    def internal_error(cls, message: str = "服务器内部错误") -> JSONResponse:
        """内部错误响应，消息不包含真实原因。"""
        return cls.fail(status.HTTP_500_INTERNAL_SERVER_ERROR, message, "INTERNAL_ERROR")


__all__ = [
    "Pagination",
    "ResponseBuilder",
    "ResponseEnvelope",
]
