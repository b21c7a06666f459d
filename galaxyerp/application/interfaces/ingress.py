"""入站请求解析：分页、排序与过滤参数。

列表接口的查询参数统一由 parse_list_query 解析。解析永不失败：
格式错误的值回退为默认值，越界的值被夹到合法区间内。
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import Enum

from fastapi import Request
from pydantic import BaseModel, ConfigDict, Field

from .egress import Pagination

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000
DEFAULT_SORT_FIELD = "id"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class SortOrder(str, Enum):
    """排序方向枚举。"""

    ASC = "asc"
    DESC = "desc"


class ListQuery(BaseModel):
    """列表查询参数（不可变）。

    Attributes:
        page: 页码（1-MAX_PAGE）
        page_size: 每页数量（1-100）
        sort_by: 排序字段（由服务层按白名单校验）
        sort_desc: 是否降序
        keyword: 关键字搜索
        status: 状态过滤
        start_date: 开始日期
        end_date: 结束日期
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort_by: str = Field(default=DEFAULT_SORT_FIELD)
    sort_desc: bool = Field(default=True)
    keyword: str | None = None
    status: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @property
    def offset(self) -> int:
        """跳过的记录数。"""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """限制的记录数。"""
        return self.page_size

    @property
    def order(self) -> SortOrder:
        return SortOrder.DESC if self.sort_desc else SortOrder.ASC

    def sort_field(self, allowed: frozenset[str] | set[str]) -> str:
        """返回白名单内的排序字段，不在白名单内时回退到 id。"""
        return self.sort_by if self.sort_by in allowed else DEFAULT_SORT_FIELD


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _parse_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _clean(raw: str | None) -> str | None:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def clamp_page(page: int) -> int:
    return min(max(page, 1), MAX_PAGE)


def clamp_page_size(page_size: int) -> int:
    return min(max(page_size, 1), MAX_PAGE_SIZE)


def parse_list_query(
    params: Mapping[str, str],
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> ListQuery:
    """解析列表查询参数（纯函数）。

    Args:
        params: 查询参数映射（如 request.query_params）
        default_page_size: 该类接口的默认页大小

    Returns:
        ListQuery: 规范化后的查询参数
    """
    page = clamp_page(_parse_int(params.get("page"), DEFAULT_PAGE))
    page_size = clamp_page_size(_parse_int(params.get("page_size"), default_page_size))

    sort_by = _clean(params.get("sort_by")) or DEFAULT_SORT_FIELD
    sort_desc = True
    if params.get("sort_desc") is not None:
        sort_desc = params["sort_desc"].strip().lower() in _TRUE_VALUES
    elif params.get("sort_order") is not None:
        sort_desc = params["sort_order"].strip().lower() != SortOrder.ASC.value

    return ListQuery(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_desc=sort_desc,
        keyword=_clean(params.get("keyword")),
        status=_clean(params.get("status")),
        start_date=_parse_date(params.get("start_date")),
        end_date=_parse_date(params.get("end_date")),
    )


def build_pagination(query: ListQuery, total: int) -> Pagination:
    """根据查询参数和总数构建分页描述。"""
    return Pagination.create(page=query.page, page_size=query.page_size, total=total)


def list_query(default_page_size: int = DEFAULT_PAGE_SIZE) -> Callable[[Request], ListQuery]:
    """FastAPI 依赖工厂：从请求中解析列表查询参数。

    使用示例:
        @router.get("/accounts")
        async def list_accounts(query: ListQuery = Depends(list_query(10))):
            ...
    """

    def dependency(request: Request) -> ListQuery:
        return parse_list_query(request.query_params, default_page_size)

    return dependency


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE",
    "MAX_PAGE_SIZE",
    "ListQuery",
    "SortOrder",
    "build_pagination",
    "clamp_page",
    "clamp_page_size",
    "list_query",
    "parse_list_query",
]
