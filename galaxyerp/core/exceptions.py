"""核心层异常。

这些异常不依赖 HTTP，由仓储层抛出，应用层的错误分类器负责转换。
"""

from __future__ import annotations


class CoreError(Exception):
    """核心层异常基类。"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingFilterError(CoreError):
    """批量更新/删除缺少查询条件。

    仓储层拒绝执行没有任何过滤条件的批量写操作。
    """

    def __init__(self, message: str = "缺少查询条件", model: str | None = None) -> None:
        super().__init__(message)
        self.model = model


__all__ = [
    "CoreError",
    "MissingFilterError",
]
