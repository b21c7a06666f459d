"""系统控制器：部门、用户。"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from galaxyerp.application.interfaces.egress import ResponseBuilder
from galaxyerp.application.interfaces.ingress import ListQuery, build_pagination, list_query
from galaxyerp.schemas.auth import to_user_response
from galaxyerp.schemas.organization import (
    DepartmentCreateRequest,
    DepartmentUpdateRequest,
    department_fields,
    to_department_response,
)
from galaxyerp.services import DepartmentService, UserService

from .crud import register_crud_routes
from .utils import parse_id, provide

router = APIRouter(prefix="/system", tags=["system"])

PAGE_SIZE = 10

register_crud_routes(
    router,
    "/departments",
    service_cls=DepartmentService,
    create_model=DepartmentCreateRequest,
    update_model=DepartmentUpdateRequest,
    to_fields=department_fields,
    to_response=to_department_response,
    label="部门",
    page_size=PAGE_SIZE,
)


@router.get("/users")
async def list_users(
    query: ListQuery = Depends(list_query(PAGE_SIZE)),
    service: UserService = Depends(provide(UserService)),
) -> JSONResponse:
    users, total = await service.list(query)
    return ResponseBuilder.paginated(
        [to_user_response(user) for user in users],
        build_pagination(query, total),
    )


@router.get("/users/{id}")
async def get_user(
    id: str,
    service: UserService = Depends(provide(UserService)),
) -> JSONResponse:
    user = await service.get(parse_id(id))
    return ResponseBuilder.ok(to_user_response(user), "获取成功")


__all__ = ["router"]
