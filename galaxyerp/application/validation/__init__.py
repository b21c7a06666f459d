"""请求数据校验。"""

from .messages import RULE_MESSAGES, Violation, field_errors, render_message, translate_errors
from .types import (
    AccountCode,
    BankCard,
    Currency,
    DateField,
    Email,
    IDCard,
    Phone,
    StrongPassword,
    ensure_not_before,
    fixed_length,
)
from .validator import Validator, ViolationError

__all__ = [
    "RULE_MESSAGES",
    "AccountCode",
    "BankCard",
    "Currency",
    "DateField",
    "Email",
    "IDCard",
    "Phone",
    "StrongPassword",
    "Validator",
    "Violation",
    "ViolationError",
    "ensure_not_before",
    "field_errors",
    "fixed_length",
    "render_message",
    "translate_errors",
]
