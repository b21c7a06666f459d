"""校验违规项与中文错误消息。

把 Pydantic 的错误类型映射为规则名，再按规则渲染中文消息。
自定义规则（phone、id_card 等）通过 PydanticCustomError 的类型名直接携带规则名。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import re
from typing import Any

# 请求位置前缀（FastAPI 请求校验错误的 loc 第一段）
_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})

_PYDANTIC_RULES: dict[str, str] = {
    "missing": "required",
    "string_too_short": "min",
    "too_short": "min",
    "string_too_long": "max",
    "too_long": "max",
    "greater_than": "gt",
    "greater_than_equal": "gte",
    "less_than": "lt",
    "less_than_equal": "lte",
    "literal_error": "oneof",
    "enum": "oneof",
    "int_parsing": "type",
    "int_type": "type",
    "int_from_float": "type",
    "float_parsing": "type",
    "float_type": "type",
    "decimal_parsing": "type",
    "string_type": "type",
    "bool_parsing": "type",
    "bool_type": "type",
    "list_type": "type",
    "model_type": "type",
    "dict_type": "type",
    "date_parsing": "date",
    "date_type": "date",
    "date_from_datetime_parsing": "date",
}

_PARAM_KEYS: dict[str, str] = {
    "min": "min_length",
    "max": "max_length",
    "gt": "gt",
    "gte": "ge",
    "lt": "lt",
    "lte": "le",
}

RULE_MESSAGES: dict[str, str] = {
    "required": "{field}是必填字段",
    "email": "{field}必须是有效的邮箱地址",
    "min": "{field}最小值为{param}",
    "max": "{field}最大值为{param}",
    "len": "{field}长度必须为{param}",
    "oneof": "{field}必须是以下值之一: {param}",
    "gt": "{field}必须大于{param}",
    "gte": "{field}必须大于或等于{param}",
    "lt": "{field}必须小于{param}",
    "lte": "{field}必须小于或等于{param}",
    "gtefield": "{field}必须大于或等于{param}",
    "phone": "{field}必须是有效的手机号码",
    "id_card": "{field}必须是有效的身份证号码",
    "password": "{field}强度不足: {param}",
    "account_code": "{field}必须是有效的科目编码",
    "currency": "{field}必须是有效的金额（非负且最多两位小数）",
    "bank_card": "{field}必须是有效的银行卡号",
    "date": "{field}必须是YYYY-MM-DD格式的日期",
    "type": "{field}格式不正确",
}

DEFAULT_MESSAGE = "{field}验证失败"


@dataclass(frozen=True)
class Violation:
    """单条校验违规。

    Attributes:
        field: 线上字段名（别名），嵌套字段以点号连接
        rule: 违反的规则名
        message: 中文错误消息
    """

    field: str
    rule: str
    message: str


def render_message(rule: str, field: str, param: Any | None = None) -> str:
    """按规则渲染中文消息。"""
    template = RULE_MESSAGES.get(rule, DEFAULT_MESSAGE)
    return template.format(field=field, param="" if param is None else param)


def _field_name(loc: Iterable[Any], strip_location: bool) -> str:
    parts = [str(part) for part in loc]
    if strip_location and parts and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


def _oneof_param(ctx: Mapping[str, Any]) -> str:
    expected = str(ctx.get("expected", ""))
    values = re.findall(r"'([^']*)'", expected)
    return " ".join(values) if values else expected


def _rule_and_param(error: Mapping[str, Any]) -> tuple[str, Any | None]:
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    rule = _PYDANTIC_RULES.get(error_type, error_type)

    if rule == "oneof":
        return rule, _oneof_param(ctx)
    if rule in _PARAM_KEYS:
        return rule, ctx.get(_PARAM_KEYS[rule])
    return rule, ctx.get("param")


def translate_errors(
    errors: Iterable[Mapping[str, Any]],
    strip_location: bool = False,
) -> list[Violation]:
    """把 Pydantic 错误列表转换为违规项列表。

    Args:
        errors: ValidationError.errors() 的结果
        strip_location: 是否去掉 loc 的请求位置前缀（body/query/...）

    Returns:
        list[Violation]: 每个错误对应一条违规项
    """
    violations: list[Violation] = []
    for error in errors:
        field = _field_name(error.get("loc", ()), strip_location)
        rule, param = _rule_and_param(error)
        violations.append(Violation(
            field=field,
            rule=rule,
            message=render_message(rule, field, param),
        ))
    return violations


def field_errors(violations: Iterable[Violation]) -> dict[str, str]:
    """按字段汇总错误消息（每个字段保留第一条）。"""
    result: dict[str, str] = {}
    for violation in violations:
        result.setdefault(violation.field, violation.message)
    return result


__all__ = [
    "DEFAULT_MESSAGE",
    "RULE_MESSAGES",
    "Violation",
    "field_errors",
    "render_message",
    "translate_errors",
]
