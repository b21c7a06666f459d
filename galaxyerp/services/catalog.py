"""主数据服务：库存、销售、采购、生产、人事、项目与系统。

都是标准 CRUD，差异只在实体名称、检索字段与排序白名单。
"""

from __future__ import annotations

from typing import Any

from galaxyerp.application.interfaces.errors import BusinessError
from galaxyerp.domain.models import (
    Customer,
    Department,
    Employee,
    Item,
    Product,
    Project,
    Supplier,
    User,
    Warehouse,
)

from .base import DEFAULT_SORT_FIELDS, CrudService


class ItemService(CrudService[Item]):
    model = Item
    entity_name = "物料"
    keyword_fields = ("code", "name", "barcode")
    sort_fields = DEFAULT_SORT_FIELDS | {"unit_cost", "sale_price"}


class WarehouseService(CrudService[Warehouse]):
    model = Warehouse
    entity_name = "仓库"


class CustomerService(CrudService[Customer]):
    model = Customer
    entity_name = "客户"
    keyword_fields = ("code", "name", "contact_name", "phone")
    sort_fields = DEFAULT_SORT_FIELDS | {"credit_limit"}


class SupplierService(CrudService[Supplier]):
    model = Supplier
    entity_name = "供应商"
    keyword_fields = ("code", "name", "contact_name", "phone")


class ProductService(CrudService[Product]):
    model = Product
    entity_name = "产品"
    keyword_fields = ("code", "name", "category")
    sort_fields = DEFAULT_SORT_FIELDS | {"price", "cost"}


class EmployeeService(CrudService[Employee]):
    model = Employee
    entity_name = "员工"
    keyword_fields = ("code", "first_name", "last_name", "email", "phone")
    sort_fields = frozenset({"id", "code", "last_name", "hire_date", "created_at", "updated_at"})
    date_field = "hire_date"


class ProjectService(CrudService[Project]):
    model = Project
    entity_name = "项目"
    sort_fields = DEFAULT_SORT_FIELDS | {"start_date", "end_date", "budget", "priority"}
    date_field = "start_date"

    async def _before_update(self, entity: Project, fields: dict[str, Any]) -> dict[str, Any]:
        fields = await super()._before_update(entity, fields)
        start_date = fields.get("start_date", entity.start_date)
        end_date = fields.get("end_date", entity.end_date)
        if start_date and end_date and end_date < start_date:
            raise BusinessError("结束日期不能早于开始日期")
        return fields


class DepartmentService(CrudService[Department]):
    """部门服务，部门可以挂在上级部门下。"""

    model = Department
    entity_name = "部门"

    async def _check_parent(self, parent_id: int | None, self_id: int | None = None) -> None:
        if parent_id is None:
            return
        if parent_id == self_id:
            raise BusinessError("部门不能以自己作为上级部门")
        if not await self.repository.exists(id=parent_id):
            raise BusinessError("上级部门不存在")

    async def _before_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        fields = await super()._before_create(fields)
        await self._check_parent(fields.get("parent_id"))
        return fields

    async def _before_update(self, entity: Department, fields: dict[str, Any]) -> dict[str, Any]:
        fields = await super()._before_update(entity, fields)
        await self._check_parent(fields.get("parent_id"), entity.id)
        return fields

    async def _before_delete(self, entity: Department) -> None:
        if await self.repository.exists(parent_id=entity.id):
            raise BusinessError("存在下级部门，无法删除")


class UserService(CrudService[User]):
    """系统用户查询（账户的创建走认证接口）。"""

    model = User
    entity_name = "用户"
    keyword_fields = ("username", "email", "first_name", "last_name")
    sort_fields = frozenset({"id", "username", "email", "created_at", "last_login_at"})
    unique_code = False


__all__ = [
    "CustomerService",
    "DepartmentService",
    "EmployeeService",
    "ItemService",
    "ProductService",
    "ProjectService",
    "SupplierService",
    "UserService",
    "WarehouseService",
]
