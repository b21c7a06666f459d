"""请求与响应模型（DTO）及其显式映射函数。

每个实体提供：
- <Entity>CreateRequest / <Entity>UpdateRequest: 声明字段约束的请求模型
- <Entity>Response: 响应模型
- <entity>_fields(request): 请求 -> 写入字段
- to_<entity>_response(model): ORM 模型 -> 响应模型
"""

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

__all__ = [
    "RequestModel",
    "ResponseModel",
    "UpdateRequestModel",
    "collect_fields",
]
