"""自定义字段类型。

以 Annotated 类型声明领域格式规则，校验失败时抛出 PydanticCustomError，
错误类型名即规则名（phone、id_card、email ...），由 messages 渲染中文消息。

使用示例:
    class CustomerCreateRequest(RequestModel):
        email: Email | None = None
        phone: Phone | None = None
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import re
from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BeforeValidator, ValidationInfo
from pydantic_core import PydanticCustomError

from galaxyerp.utils.security import validate_password_strength

PHONE_PATTERN = re.compile(r"^1[3-9]\d{9}$")
ID_CARD_PATTERN = re.compile(
    r"^[1-9]\d{5}(18|19|20)\d{2}((0[1-9])|(1[0-2]))(([0-2][1-9])|10|20|30|31)\d{3}[0-9Xx]$"
)
BANK_CARD_PATTERN = re.compile(r"^\d{16,19}$")
ACCOUNT_CODE_PATTERN = re.compile(r"^[1-9]\d{3}(\.\d{2})?$")

# 记录 ID 为 32 位无符号整数
MAX_ID = 2**32 - 1


def rule_error(rule: str, param: Any | None = None) -> PydanticCustomError:
    """构造携带规则名的校验错误。"""
    return PydanticCustomError(rule, "value does not satisfy rule {rule}", {"rule": rule, "param": param})


def _check_email(value: str) -> str:
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        raise rule_error("email") from None


def _check_pattern(rule: str, pattern: re.Pattern[str]):
    def check(value: str) -> str:
        if not pattern.match(value):
            raise rule_error(rule)
        return value
    return check


def _check_password(value: str) -> str:
    strength = validate_password_strength(value)
    if not strength.is_valid:
        raise rule_error("password", "，".join(strength.feedback))
    return value


def _check_currency(value: float) -> float:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise rule_error("currency") from None
    if not amount.is_finite() or amount < 0 or amount.as_tuple().exponent < -2:
        raise rule_error("currency")
    return value


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass
    raise rule_error("date")


def fixed_length(length: int) -> AfterValidator:
    """字符串长度必须恰好为 length。"""

    def check(value: str) -> str:
        if len(value) != length:
            raise rule_error("len", length)
        return value

    return AfterValidator(check)


def ensure_not_before(value: date | None, info: ValidationInfo, other: str) -> date | None:
    """跨字段校验：value 不得早于同一模型中的 other 字段。"""
    start = info.data.get(other)
    if value is not None and start is not None and value < start:
        raise rule_error("gtefield", other)
    return value


Email = Annotated[str, AfterValidator(_check_email)]
Phone = Annotated[str, AfterValidator(_check_pattern("phone", PHONE_PATTERN))]
IDCard = Annotated[str, AfterValidator(_check_pattern("id_card", ID_CARD_PATTERN))]
BankCard = Annotated[str, AfterValidator(_check_pattern("bank_card", BANK_CARD_PATTERN))]
AccountCode = Annotated[str, AfterValidator(_check_pattern("account_code", ACCOUNT_CODE_PATTERN))]
StrongPassword = Annotated[str, AfterValidator(_check_password)]
Currency = Annotated[float, AfterValidator(_check_currency)]
DateField = Annotated[date, BeforeValidator(_parse_date)]


__all__ = [
    "MAX_ID",
    "AccountCode",
    "BankCard",
    "Currency",
    "DateField",
    "Email",
    "IDCard",
    "Phone",
    "StrongPassword",
    "ensure_not_before",
    "fixed_length",
    "rule_error",
]
