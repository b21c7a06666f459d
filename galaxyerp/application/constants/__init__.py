"""应用层常量。"""

from .components import ComponentName

__all__ = [
    "ComponentName",
]
