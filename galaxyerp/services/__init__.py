"""业务服务层。

服务以类型化异常（NotFoundError / ConflictError / BusinessError）报告失败，
控制器不做消息字符串匹配。
"""

from .accounting import (
    ACCOUNT_TYPE_LABELS,
    AccountService,
    JournalEntryService,
    PaymentService,
    line_totals,
)
from .auth import AuthResult, AuthService
from .base import BaseService, CrudService
from .catalog import (
    CustomerService,
    DepartmentService,
    EmployeeService,
    ItemService,
    ProductService,
    ProjectService,
    SupplierService,
    UserService,
    WarehouseService,
)

__all__ = [
    "ACCOUNT_TYPE_LABELS",
    "AccountService",
    "AuthResult",
    "AuthService",
    "BaseService",
    "CrudService",
    "CustomerService",
    "DepartmentService",
    "EmployeeService",
    "ItemService",
    "JournalEntryService",
    "PaymentService",
    "ProductService",
    "ProjectService",
    "SupplierService",
    "UserService",
    "WarehouseService",
    "line_totals",
]
