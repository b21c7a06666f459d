"""日志管理。

提供：
- setup_logging：控制台输出与按日滚动的日志文件（ERROR 另存一份）
- 链路追踪 ID（基于 ContextVar，每个请求独立），自动写入每条日志的 extra.trace_id
- log_performance：服务方法耗时监控
- get_class_logger：绑定组件名的日志器

HTTP 请求日志见 application.middleware.logging。
"""

from __future__ import annotations

from collections.abc import Callable
from contextvars import ContextVar
from functools import wraps
import os
import time
from typing import Any

from loguru import logger

# 未调用 setup_logging 前不输出任何日志
logger.remove()

NO_TRACE_ID = "-"

_trace_id: ContextVar[str] = ContextVar("trace_id", default=NO_TRACE_ID)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> | "
    "{extra[trace_id]:.8} - "
    "<level>{message}</level>"
)

FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {extra[trace_id]} - {message}"
)


def get_trace_id() -> str:
    """当前上下文的链路追踪ID，请求外为 "-"。"""
    return _trace_id.get()


def set_trace_id(trace_id: str) -> None:
    _trace_id.set(trace_id)


def _inject_trace_id(record: dict[str, Any]) -> None:
    record["extra"].setdefault("trace_id", _trace_id.get())


logger.configure(patcher=_inject_trace_id)


def _file_sinks(log_dir: str, log_level: str) -> list[tuple[str, str]]:
    """(文件路径模板, 最低级别)"""
    return [
        (os.path.join(log_dir, "app_{time:YYYY-MM-DD}.log"), log_level),
        (os.path.join(log_dir, "error_{time:YYYY-MM-DD}.log"), "ERROR"),
    ]


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | None = None,
    enable_console: bool = True,
    enable_file: bool = True,
    rotation_time: str = "00:00",
    retention_days: int = 7,
) -> None:
    """配置全局日志输出。

    每次调用都会替换之前的全部输出，应用构造时调用一次。

    Args:
        log_level: 日志级别（DEBUG/INFO/WARNING/ERROR/CRITICAL）
        log_dir: 日志目录（默认：./log）
        enable_console: 是否输出到控制台
        enable_file: 是否写入日志文件
        rotation_time: 每日滚动时间
        retention_days: 日志保留天数
    """
    log_level = log_level.upper()
    log_dir = log_dir or "log"

    logger.remove()
    logger.configure(patcher=_inject_trace_id)

    if enable_console:
        logger.add(lambda msg: print(msg, end=""), format=CONSOLE_FORMAT, level=log_level, colorize=True)

    if enable_file:
        os.makedirs(log_dir, exist_ok=True)
        for path, level in _file_sinks(log_dir, log_level):
            logger.add(
                path,
                level=level,
                format=FILE_FORMAT,
                rotation=rotation_time,
                retention=f"{retention_days} days",
                encoding="utf-8",
                enqueue=True,
                backtrace=level == "ERROR",
            )

    logger.info(
        f"日志系统初始化完成 | 级别: {log_level} | "
        f"文件: {log_dir if enable_file else '关闭'} | 控制台: {'开启' if enable_console else '关闭'}"
    )


def log_performance(threshold: float = 1.0) -> Callable:
    """异步方法耗时监控，超过阈值记录 WARNING。

    使用示例:
        @log_performance(threshold=0.5)
        async def list(self, query: ListQuery):
            ...
    """

    def decorator[T](func: Callable[..., T]) -> Callable[..., T]:
        name = f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            started = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - started
                if elapsed > threshold:
                    logger.warning(f"慢调用: {name} 耗时 {elapsed:.3f}s (阈值 {threshold}s)")
                else:
                    logger.debug(f"{name} 耗时 {elapsed:.3f}s")

        return wrapper

    return decorator


def get_class_logger(obj: object) -> Any:
    """绑定了 component（模块.类名）的日志器，obj 可以是实例或类。"""
    cls = obj if isinstance(obj, type) else type(obj)
    return logger.bind(component=f"{cls.__module__}.{cls.__name__}")


__all__ = [
    "NO_TRACE_ID",
    "get_class_logger",
    "get_trace_id",
    "log_performance",
    "logger",
    "set_trace_id",
    "setup_logging",
]
