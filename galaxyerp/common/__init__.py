"""通用基础设施（日志等），不依赖应用层。"""

from .logging import get_trace_id, logger, set_trace_id, setup_logging

__all__ = [
    "get_trace_id",
    "logger",
    "set_trace_id",
    "setup_logging",
]
