"""核心层：数据库、模型基类、事务与核心异常。"""

from .exceptions import CoreError, MissingFilterError
from .models import Base, IDMixin, Model, TimestampMixin

__all__ = [
    "Base",
    "CoreError",
    "IDMixin",
    "MissingFilterError",
    "Model",
    "TimestampMixin",
]
