"""项目控制器。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.operations import (
    ProjectCreateRequest,
    ProjectUpdateRequest,
    project_fields,
    to_project_response,
)
from galaxyerp.services import ProjectService

from .crud import register_crud_routes

router = APIRouter(prefix="/project", tags=["project"])

register_crud_routes(
    router,
    "/projects",
    service_cls=ProjectService,
    create_model=ProjectCreateRequest,
    update_model=ProjectUpdateRequest,
    to_fields=project_fields,
    to_response=to_project_response,
    label="项目",
)

__all__ = ["router"]
