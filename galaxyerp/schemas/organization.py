"""组织模型：员工（人事）、部门（系统）。"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import Field

from galaxyerp.application.validation.types import MAX_ID, DateField, Email, IDCard, Phone
from galaxyerp.domain.models import Department, Employee

from .common import RequestModel, ResponseModel, UpdateRequestModel, collect_fields

Gender = Literal["male", "female", "other"]
EmployeeStatus = Literal["active", "inactive", "terminated"]


class EmployeeCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="员工编号")
    first_name: str = Field(..., min_length=1, max_length=50, description="名")
    last_name: str = Field(..., min_length=1, max_length=50, description="姓")
    email: Email | None = Field(default=None, description="邮箱")
    phone: Phone | None = Field(default=None, description="电话")
    gender: Gender | None = Field(default=None, description="性别")
    hire_date: DateField | None = Field(default=None, description="入职日期")
    department_id: int | None = Field(default=None, gt=0, le=MAX_ID, description="部门ID")
    position: str | None = Field(default=None, max_length=50, description="职位")
    id_number: IDCard | None = Field(default=None, description="身份证号")
    status: EmployeeStatus = Field(default="active", description="状态")


class EmployeeUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)
    email: Email | None = None
    phone: Phone | None = None
    gender: Gender | None = None
    hire_date: DateField | None = None
    department_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    position: str | None = Field(default=None, max_length=50)
    id_number: IDCard | None = None
    status: EmployeeStatus | None = None


class EmployeeResponse(ResponseModel):
    code: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    gender: str | None = None
    hire_date: date | None = None
    department_id: int | None = None
    position: str | None = None
    status: str


def employee_fields(request: EmployeeCreateRequest | EmployeeUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "first_name": request.first_name,
        "last_name": request.last_name,
        "email": request.email,
        "phone": request.phone,
        "gender": request.gender,
        "hire_date": request.hire_date,
        "department_id": request.department_id,
        "position": request.position,
        "id_number": request.id_number,
        "status": request.status,
    })


def to_employee_response(employee: Employee) -> EmployeeResponse:
    # 身份证号不对外返回
    return EmployeeResponse(
        id=employee.id,
        code=employee.code,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        phone=employee.phone,
        gender=employee.gender,
        hire_date=employee.hire_date,
        department_id=employee.department_id,
        position=employee.position,
        status=employee.status,
        created_at=employee.created_at,
        updated_at=employee.updated_at,
    )


class DepartmentCreateRequest(RequestModel):
    code: str = Field(..., min_length=1, max_length=50, description="部门编码")
    name: str = Field(..., min_length=1, max_length=100, description="部门名称")
    description: str | None = Field(default=None, max_length=500, description="描述")
    parent_id: int | None = Field(default=None, gt=0, le=MAX_ID, description="上级部门ID")
    is_active: bool = Field(default=True, description="是否启用")


class DepartmentUpdateRequest(UpdateRequestModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    parent_id: int | None = Field(default=None, gt=0, le=MAX_ID)
    is_active: bool | None = None


class DepartmentResponse(ResponseModel):
    code: str
    name: str
    description: str | None = None
    parent_id: int | None = None
    is_active: bool


def department_fields(request: DepartmentCreateRequest | DepartmentUpdateRequest) -> dict[str, Any]:
    return collect_fields(request, {
        "code": request.code,
        "name": request.name,
        "description": request.description,
        "parent_id": request.parent_id,
        "is_active": request.is_active,
    })


def to_department_response(department: Department) -> DepartmentResponse:
    return DepartmentResponse(
        id=department.id,
        code=department.code,
        name=department.name,
        description=department.description,
        parent_id=department.parent_id,
        is_active=department.is_active,
        created_at=department.created_at,
        updated_at=department.updated_at,
    )


__all__ = [
    "DepartmentCreateRequest",
    "DepartmentResponse",
    "DepartmentUpdateRequest",
    "EmployeeCreateRequest",
    "EmployeeResponse",
    "EmployeeUpdateRequest",
    "department_fields",
    "employee_fields",
    "to_department_response",
    "to_employee_response",
]
