"""Repository 基类。

设计原则：
- Repository 只负责数据访问，不执行 commit，只执行 flush
- 事务由 Service 层通过 @transactional 管理
- 批量写操作必须带过滤条件
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Any

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from galaxyerp.application.interfaces.ingress import ListQuery
from galaxyerp.common.logging import logger
from galaxyerp.core.exceptions import MissingFilterError
from galaxyerp.core.models import Model


class BaseRepository[ModelType: Model]:
    """Repository 基类。

    提供通用的CRUD与分页查询实现，子类可以重写或扩展。

    Attributes:
        session: 数据库会话
        model_class: 模型类
    """

    def __init__(self, session: AsyncSession, model_class: type[ModelType]) -> None:
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        """获取数据库会话。"""
        return self._session

    @property
    def model_class(self) -> type[ModelType]:
        """获取模型类。"""
        return self._model_class

    def _build_base_query(self) -> Select:
        return select(self._model_class)

    def _apply_filters(self, query: Select, **filters) -> Select:
        """应用等值过滤条件（忽略 None 值与模型上不存在的字段）。"""
        for key, value in filters.items():
            if value is not None and hasattr(self._model_class, key):
                query = query.where(getattr(self._model_class, key) == value)
        return query

    def _apply_keyword(self, query: Select, keyword: str | None, fields: Iterable[str]) -> Select:
        """在多个字段上做模糊匹配（OR）。"""
        columns = [getattr(self._model_class, name) for name in fields if hasattr(self._model_class, name)]
        if not keyword or not columns:
            return query
        pattern = f"%{keyword}%"
        return query.where(or_(*(column.ilike(pattern) for column in columns)))

    def _apply_date_range(
        self,
        query: Select,
        field: str,
        start: date | None,
        end: date | None,
    ) -> Select:
        column = getattr(self._model_class, field)
        if start is not None:
            query = query.where(column >= start)
        if end is not None:
            query = query.where(column <= end)
        return query

    async def get(self, id: int) -> ModelType | None:
        """根据ID获取实体，不存在时返回None。"""
        query = self._build_base_query().where(self._model_class.id == id)
        result = await self._session.execute(query)
        return result.scalar_one_or_none()

    async def get_by(self, **filters) -> ModelType | None:
        """根据条件获取单个实体。"""
        query = self._apply_filters(self._build_base_query(), **filters)
        result = await self._session.execute(query.limit(1))
        return result.scalars().first()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> list[ModelType]:
        """获取实体列表（按 id 升序）。"""
        query = self._apply_filters(self._build_base_query(), **filters)
        query = query.order_by(self._model_class.id).offset(skip).limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def paginate(
        self,
        list_query: ListQuery,
        *,
        keyword_fields: Iterable[str] = (),
        sort_fields: Iterable[str] = (),
        date_field: str | None = None,
        **filters,
    ) -> tuple[list[ModelType], int]:
        """分页查询。

        Args:
            list_query: 列表查询参数
            keyword_fields: 关键字匹配的字段
            sort_fields: 允许排序的字段白名单
            date_field: 日期范围过滤的字段
            **filters: 等值过滤条件

        Returns:
            (当前页实体列表, 总数)
        """
        query = self._apply_filters(self._build_base_query(), **filters)
        query = self._apply_keyword(query, list_query.keyword, keyword_fields)
        if date_field is not None:
            query = self._apply_date_range(query, date_field, list_query.start_date, list_query.end_date)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self._session.execute(count_query)).scalar_one()

        sort_column = getattr(self._model_class, list_query.sort_field(set(sort_fields)))
        query = query.order_by(sort_column.desc() if list_query.sort_desc else sort_column.asc())
        query = query.offset(list_query.offset).limit(list_query.limit)

        result = await self._session.execute(query)
        return list(result.scalars().all()), total

    async def count(self, **filters) -> int:
        """统计实体数量。"""
        query = select(func.count()).select_from(self._model_class)
        query = self._apply_filters(query, **filters)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def exists(self, **filters) -> bool:
        """检查实体是否存在。"""
        return await self.count(**filters) > 0

    async def add(self, entity: ModelType) -> ModelType:
        """添加实体（不提交）。"""
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        logger.debug(f"添加实体: {entity!r}")
        return entity

    async def create(self, data: dict[str, Any]) -> ModelType:
        """创建实体（不提交）。"""
        entity = self._model_class(**data)
        return await self.add(entity)

    async def update(self, entity: ModelType, data: dict[str, Any]) -> ModelType:
        """更新实体（不提交）。"""
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)

        await self._session.flush()
        await self._session.refresh(entity)
        logger.debug(f"更新实体: {entity!r}")
        return entity

    async def delete(self, entity: ModelType) -> None:
        """删除实体（不提交）。"""
        await self._session.delete(entity)
        await self._session.flush()
        logger.debug(f"删除实体: {entity!r}")

    async def delete_where(self, **filters) -> int:
        """按条件批量删除（不提交）。

        Raises:
            MissingFilterError: 未提供任何有效过滤条件
        """
        conditions = [
            getattr(self._model_class, key) == value
            for key, value in filters.items()
            if value is not None and hasattr(self._model_class, key)
        ]
        if not conditions:
            raise MissingFilterError(model=self._model_class.__name__)

        result = await self._session.execute(delete(self._model_class).where(*conditions))
        await self._session.flush()
        logger.debug(f"批量删除 {self._model_class.__name__}: {result.rowcount} 条")
        return result.rowcount

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self._model_class.__name__}>"


__all__ = [
    "BaseRepository",
]
