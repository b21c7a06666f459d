"""用户模型。"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from galaxyerp.core.models import Model


class User(Model):
    """系统用户。"""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="用户名")
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True, comment="邮箱")
    password_hash: Mapped[str] = mapped_column(String(255), comment="密码哈希")
    first_name: Mapped[str] = mapped_column(String(50), default="", comment="名")
    last_name: Mapped[str] = mapped_column(String(50), default="", comment="姓")
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="手机号")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="最后登录时间"
    )


__all__ = ["User"]
