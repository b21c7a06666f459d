"""组件名称常量。

定义应用内置组件的标准命名。
"""

from __future__ import annotations

from enum import Enum


class ComponentName(str, Enum):
    """组件名称常量。"""

    # 中间件组件
    CORS = "cors"
    REQUEST_LOGGING = "request_logging"
    ERROR_HANDLING = "error_handling"
    AUTHENTICATION = "authentication"

    # 基础设施组件
    DATABASE = "database"


__all__ = [
    "ComponentName",
]
