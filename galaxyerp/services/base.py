"""Service 基类。

提供服务层的基础功能和通用 CRUD 逻辑。
"""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.application.interfaces.errors import ConflictError, NotFoundError
from galaxyerp.application.interfaces.ingress import ListQuery
from galaxyerp.common.logging import get_class_logger, log_performance
from galaxyerp.core.models import Model
from galaxyerp.core.transaction import transactional
from galaxyerp.repositories.base import BaseRepository

DEFAULT_SORT_FIELDS = frozenset({"id", "code", "name", "created_at", "updated_at"})


class BaseService:
    """Service 基类。

    职责：
    1. 持有数据库会话
    2. 协调 Repository
    3. 实现业务规则，以类型化异常报告失败
    4. 通过 @transactional 管理事务边界

    使用示例:
        class AuthService(BaseService):
            def __init__(self, session: AsyncSession, ...):
                super().__init__(session)
                self.users = UserRepository(session)
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.log = get_class_logger(self)

    @property
    def session(self) -> AsyncSession:
        """获取数据库会话。"""
        return self._session

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class CrudService[ModelType: Model](BaseService):
    """通用 CRUD 服务。

    子类声明模型、实体名称与查询白名单即可获得标准的增删改查：

        class WarehouseService(CrudService[Warehouse]):
            model = Warehouse
            entity_name = "仓库"

    不存在时抛出 NotFoundError(entity_name)，编码重复时抛出 ConflictError。
    """

    model: ClassVar[type[Model]]
    entity_name: ClassVar[str] = "资源"
    keyword_fields: ClassVar[tuple[str, ...]] = ("code", "name")
    sort_fields: ClassVar[frozenset[str]] = DEFAULT_SORT_FIELDS
    date_field: ClassVar[str | None] = None
    unique_code: ClassVar[bool] = True

    def __init__(self, session: AsyncSession, repository: BaseRepository[ModelType] | None = None) -> None:
        super().__init__(session)
        self.repository: BaseRepository[ModelType] = repository or BaseRepository(session, self.model)

    async def get(self, id: int) -> ModelType:
        """获取实体。

        Raises:
            NotFoundError: 实体不存在
        """
        entity = await self.repository.get(id)
        if entity is None:
            raise NotFoundError(self.entity_name)
        return entity

    @log_performance(threshold=0.5)
    async def list(self, query: ListQuery, **filters: Any) -> tuple[list[ModelType], int]:
        """分页查询。

        Returns:
            (当前页实体列表, 总数)
        """
        filters = {**self._status_filters(query.status), **filters}
        return await self.repository.paginate(
            query,
            keyword_fields=self.keyword_fields,
            sort_fields=self.sort_fields,
            date_field=self.date_field,
            **filters,
        )

    @transactional
    async def create(self, fields: dict[str, Any]) -> ModelType:
        fields = await self._before_create(fields)
        entity = await self.repository.create(fields)
        self.log.info(f"{self.entity_name}已创建: id={entity.id}")
        return entity

    @transactional
    async def update(self, id: int, fields: dict[str, Any]) -> ModelType:
        entity = await self.get(id)
        fields = await self._before_update(entity, fields)
        entity = await self.repository.update(entity, fields)
        self.log.info(f"{self.entity_name}已更新: id={entity.id}")
        return entity

    @transactional
    async def delete(self, id: int) -> None:
        entity = await self.get(id)
        await self._before_delete(entity)
        await self.repository.delete(entity)
        self.log.info(f"{self.entity_name}已删除: id={id}")

    def _status_filters(self, status: str | None) -> dict[str, Any]:
        """把 status 查询参数映射为过滤条件。"""
        if status is None:
            return {}
        if hasattr(self.model, "status"):
            return {"status": status}
        if hasattr(self.model, "is_active") and status in ("active", "inactive"):
            return {"is_active": status == "active"}
        return {}

    async def _ensure_unique_code(self, code: str | None) -> None:
        if code and await self.repository.exists(code=code):
            raise ConflictError(f"{self.entity_name}编码已存在")

    async def _before_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """创建前的钩子（子类可重写）。"""
        if self.unique_code:
            await self._ensure_unique_code(fields.get("code"))
        return fields

    async def _before_update(self, entity: ModelType, fields: dict[str, Any]) -> dict[str, Any]:
        """更新前的钩子（子类可重写）。"""
        if self.unique_code and fields.get("code") not in (None, getattr(entity, "code", None)):
            await self._ensure_unique_code(fields["code"])
        return fields

    async def _before_delete(self, entity: ModelType) -> None:
        """删除前的钩子（子类可重写）。"""


__all__ = [
    "DEFAULT_SORT_FIELDS",
    "BaseService",
    "CrudService",
]
