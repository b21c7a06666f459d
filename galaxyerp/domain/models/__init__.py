"""领域模型。

导入本包即把所有模型注册到 Base.metadata。
"""

from .accounting import ACCOUNT_TYPES, Account, JournalEntry, JournalEntryLine, Payment
from .catalog import Customer, Department, Employee, Item, Product, Project, Supplier, Warehouse
from .user import User

__all__ = [
    "ACCOUNT_TYPES",
    "Account",
    "Customer",
    "Department",
    "Employee",
    "Item",
    "JournalEntry",
    "JournalEntryLine",
    "Payment",
    "Product",
    "Project",
    "Supplier",
    "User",
    "Warehouse",
]
