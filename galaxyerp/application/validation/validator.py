"""结构化校验器。

Validator 是显式构造的实例，由应用装配时放入 app.state，
控制器通过依赖注入获取，不使用模块级全局实例。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from galaxyerp.application.interfaces.errors import ValidationError

from .messages import Violation, field_errors, translate_errors


class ViolationError(ValidationError):
    """请求数据校验失败，details 中携带 field_errors。"""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = violations
        super().__init__(details={"field_errors": field_errors(violations)})


class Validator:
    """请求模型校验器。

    使用示例:
        validator = Validator()
        request, violations = validator.validate(AccountCreateRequest, payload)
        if violations:
            ...
    """

    def validate[T: BaseModel](
        self,
        model_cls: type[T],
        payload: Any,
    ) -> tuple[T | None, list[Violation]]:
        """校验负载。

        Returns:
            (实例, []) 校验通过；(None, 违规列表) 校验失败
        """
        try:
            instance = model_cls.model_validate(payload)
        except PydanticValidationError as exc:
            return None, translate_errors(exc.errors())
        return instance, []

    def validate_or_raise[T: BaseModel](self, model_cls: type[T], payload: Any) -> T:
        """校验负载，失败时抛出 ViolationError。"""
        instance, violations = self.validate(model_cls, payload)
        if violations:
            raise ViolationError(violations)
        return instance

    def __repr__(self) -> str:
        return "<Validator>"


__all__ = [
    "Validator",
    "ViolationError",
]
