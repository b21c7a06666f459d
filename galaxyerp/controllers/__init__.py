"""HTTP 控制器。

每个业务域一个路由模块，统一挂载在 /api/v1 下。
"""

from fastapi import APIRouter

from galaxyerp.application.app.base import API_PREFIX

from . import accounting, auth, hr, inventory, production, project, purchase, sales, system

api_router = APIRouter(prefix=API_PREFIX)

for _module in (auth, accounting, inventory, sales, purchase, production, hr, project, system):
    api_router.include_router(_module.router)

__all__ = ["api_router"]
