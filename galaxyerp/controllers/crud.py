"""标准 CRUD 路由。

主数据实体（物料、仓库、客户 ...）的五个端点形状完全一致：

    POST   /{path}        创建（201）
    GET    /{path}        分页列表（keyword / status / 排序）
    GET    /{path}/{id}   详情
    PUT    /{path}/{id}   更新
    DELETE /{path}/{id}   删除

映射函数由调用方显式传入，不做反射复制。
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from galaxyerp.application.interfaces.egress import ResponseBuilder
from galaxyerp.application.interfaces.ingress import ListQuery, build_pagination, list_query
from galaxyerp.application.validation import Validator
from galaxyerp.services import CrudService

from .utils import bind_and_validate, get_validator, parse_id, provide


def register_crud_routes(
    router: APIRouter,
    path: str,
    *,
    service_cls: type[CrudService],
    create_model: type[BaseModel],
    update_model: type[BaseModel],
    to_fields: Callable[[Any], dict[str, Any]],
    to_response: Callable[[Any], BaseModel],
    label: str,
    page_size: int = 20,
) -> APIRouter:
    """在 router 上注册一组 CRUD 端点。

    Args:
        router: 业务域路由
        path: 资源路径（如 "/items"）
        service_cls: 服务类
        create_model: 创建请求模型
        update_model: 更新请求模型
        to_fields: 请求 -> 写入字段
        to_response: ORM 模型 -> 响应模型
        label: 实体中文名，用于成功消息
        page_size: 默认每页数量
    """
    get_service = provide(service_cls)

    async def create(
        request: Request,
        service: CrudService = Depends(get_service),
        validator: Validator = Depends(get_validator),
    ) -> JSONResponse:
        payload = await bind_and_validate(request, create_model, validator)
        entity = await service.create(to_fields(payload))
        return ResponseBuilder.created(to_response(entity), f"{label}创建成功")

    async def list_all(
        query: ListQuery = Depends(list_query(page_size)),
        service: CrudService = Depends(get_service),
    ) -> JSONResponse:
        entities, total = await service.list(query)
        return ResponseBuilder.paginated(
            [to_response(entity) for entity in entities],
            build_pagination(query, total),
        )

    async def get_one(
        id: str,
        service: CrudService = Depends(get_service),
    ) -> JSONResponse:
        entity = await service.get(parse_id(id))
        return ResponseBuilder.ok(to_response(entity), "获取成功")

    async def update(
        id: str,
        request: Request,
        service: CrudService = Depends(get_service),
        validator: Validator = Depends(get_validator),
    ) -> JSONResponse:
        entity_id = parse_id(id)
        payload = await bind_and_validate(request, update_model, validator)
        entity = await service.update(entity_id, to_fields(payload))
        return ResponseBuilder.updated(to_response(entity), f"{label}更新成功")

    async def delete(
        id: str,
        service: CrudService = Depends(get_service),
    ) -> JSONResponse:
        await service.delete(parse_id(id))
        return ResponseBuilder.deleted(f"{label}删除成功")

    name = path.strip("/").replace("-", "_")
    router.add_api_route(path, create, methods=["POST"], name=f"create_{name}")
    router.add_api_route(path, list_all, methods=["GET"], name=f"list_{name}")
    router.add_api_route(f"{path}/{{id}}", get_one, methods=["GET"], name=f"get_{name}")
    router.add_api_route(f"{path}/{{id}}", update, methods=["PUT"], name=f"update_{name}")
    router.add_api_route(f"{path}/{{id}}", delete, methods=["DELETE"], name=f"delete_{name}")
    return router


__all__ = ["register_crud_routes"]
