"""数据访问层。"""

from .accounting import AccountRepository, JournalEntryRepository, PaymentRepository
from .base import BaseRepository
from .user import UserRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "JournalEntryRepository",
    "PaymentRepository",
    "UserRepository",
]
