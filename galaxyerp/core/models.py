"""领域模型基类（SQLAlchemy 2.0）。

使用 Mixin 组合主键与时间戳，所有业务模型继承 Model。
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 声明式基类"""


class IDMixin:
    """标准自增主键 Mixin"""

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        sort_order=-1,
        comment="主键ID",
    )


class TimestampMixin:
    """创建/更新时间 Mixin"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        sort_order=99,
        comment="创建时间",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        sort_order=99,
        comment="更新时间",
    )


class Model(IDMixin, TimestampMixin, Base):
    """标准整数主键模型（主键 + 时间戳）"""

    __abstract__ = True

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"


__all__ = [
    "Base",
    "IDMixin",
    "Model",
    "TimestampMixin",
]
