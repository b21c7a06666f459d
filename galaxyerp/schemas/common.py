"""请求/响应模型基类。"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RequestModel(BaseModel):
    """请求模型基类。

    字符串自动去除首尾空白，忽略未声明的字段。
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class UpdateRequestModel(RequestModel):
    """部分更新请求：只有调用方显式提供且非 null 的字段会被写入。"""


class ResponseModel(BaseModel):
    """响应模型基类。"""

    id: int = Field(..., description="ID")
    created_at: datetime | None = Field(default=None, description="创建时间")
    updated_at: datetime | None = Field(default=None, description="更新时间")


def collect_fields(request: RequestModel, values: dict[str, Any]) -> dict[str, Any]:
    """整理写入字段。

    创建请求原样返回；部分更新请求只保留已提供的非空字段。
    """
    if not isinstance(request, UpdateRequestModel):
        return values
    provided = request.model_fields_set
    return {key: value for key, value in values.items() if key in provided and value is not None}


__all__ = [
    "RequestModel",
    "ResponseModel",
    "UpdateRequestModel",
    "collect_fields",
]
