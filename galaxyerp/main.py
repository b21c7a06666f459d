"""应用入口。

使用示例:
    uvicorn galaxyerp.main:create_app --factory
"""

from __future__ import annotations

from typing import ClassVar

from galaxyerp.application.app import (
    AuthenticationComponent,
    Component,
    CORSComponent,
    DatabaseComponent,
    ErpApplication,
    ErrorHandlingComponent,
    RequestLoggingComponent,
)
from galaxyerp.application.config import AppConfig
from galaxyerp.controllers import api_router


class GalaxyERP(ErpApplication):
    """GalaxyERP 后端服务。

    中间件按列表顺序由内向外包裹，请求依次经过：
    CORS -> 请求日志 -> 错误处理 -> 认证 -> 路由
    """

    items: ClassVar[list[type[Component] | Component]] = [
        DatabaseComponent,
        AuthenticationComponent,
        ErrorHandlingComponent,
        RequestLoggingComponent,
        CORSComponent,
    ]


def create_app(config: AppConfig | None = None) -> ErpApplication:
    """创建应用实例。"""
    app = GalaxyERP(config, description="模块化 ERP 后端服务")
    app.include_router(api_router)
    return app


__all__ = [
    "GalaxyERP",
    "create_app",
]
