"""人事控制器：员工。"""

from __future__ import annotations

from fastapi import APIRouter

from galaxyerp.schemas.organization import (
    EmployeeCreateRequest,
    EmployeeUpdateRequest,
    employee_fields,
    to_employee_response,
)
from galaxyerp.services import EmployeeService

from .crud import register_crud_routes

router = APIRouter(prefix="/hr", tags=["hr"])

register_crud_routes(
    router,
    "/employees",
    service_cls=EmployeeService,
    create_model=EmployeeCreateRequest,
    update_model=EmployeeUpdateRequest,
    to_fields=employee_fields,
    to_response=to_employee_response,
    label="员工",
)

__all__ = ["router"]
