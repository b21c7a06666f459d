"""用户仓储。"""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.domain.models import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """用户仓储。"""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_login(self, login: str) -> User | None:
        """按用户名或邮箱查找用户。"""
        query = select(User).where(or_(User.username == login, User.email == login.lower()))
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()


__all__ = ["UserRepository"]
