"""密码哈希与密码强度。

- PasswordHasher：bcrypt 哈希与校验，轮数来自配置
- validate_password_strength：按 PasswordPolicy 检查密码，返回中文反馈
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import string

import bcrypt
from pydantic import BaseModel, Field

from galaxyerp.common.logging import logger

# bcrypt 只使用前 72 个字节
BCRYPT_MAX_BYTES = 72

_SPECIAL_CHARS = frozenset(string.punctuation)


class PasswordPolicy(BaseModel):
    """密码策略。

    Attributes:
        min_length: 最小长度
        require_uppercase: 需要大写字母
        require_lowercase: 需要小写字母
        require_digit: 需要数字
        require_special: 需要特殊字符
    """

    min_length: int = Field(8, ge=4, le=BCRYPT_MAX_BYTES, description="最小长度")
    require_uppercase: bool = Field(True, description="需要大写字母")
    require_lowercase: bool = Field(True, description="需要小写字母")
    require_digit: bool = Field(True, description="需要数字")
    require_special: bool = Field(False, description="需要特殊字符")


@dataclass(frozen=True)
class PasswordStrength:
    """密码检查结果。"""

    is_valid: bool
    feedback: list[str] = field(default_factory=list)


DEFAULT_POLICY = PasswordPolicy()


def _character_rules(policy: PasswordPolicy) -> list[tuple[bool, Callable[[str], bool], str]]:
    return [
        (policy.require_uppercase, lambda c: c.isupper(), "需要包含大写字母"),
        (policy.require_lowercase, lambda c: c.islower(), "需要包含小写字母"),
        (policy.require_digit, lambda c: c.isdigit(), "需要包含数字"),
        (policy.require_special, lambda c: c in _SPECIAL_CHARS, "需要包含特殊字符"),
    ]


def validate_password_strength(
    password: str,
    policy: PasswordPolicy | None = None,
) -> PasswordStrength:
    """检查密码是否满足策略。

    默认策略：至少8位，包含大写字母、小写字母和数字。
    """
    policy = policy or DEFAULT_POLICY
    feedback: list[str] = []

    if len(password) < policy.min_length:
        feedback.append(f"密码长度至少{policy.min_length}个字符")
    for required, matches, message in _character_rules(policy):
        if required and not any(matches(c) for c in password):
            feedback.append(message)

    return PasswordStrength(is_valid=not feedback, feedback=feedback)


class PasswordHasher:
    """bcrypt 密码哈希器。

    由应用装配时按配置创建并放入 app.state。

    使用示例:
        hasher = PasswordHasher(rounds=12)
        hashed = hasher.hash("Secret123")
        hasher.verify("Secret123", hashed)
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("密码不能为空")
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, hashed: str) -> bool:
        """校验密码，哈希格式错误时返回 False。"""
        try:
            return bcrypt.checkpw(password.encode(), hashed.encode())
        except ValueError as exc:
            logger.warning(f"密码哈希格式错误: {exc}")
            return False

    def __repr__(self) -> str:
        return f"<PasswordHasher rounds={self.rounds}>"


__all__ = [
    "DEFAULT_POLICY",
    "PasswordHasher",
    "PasswordPolicy",
    "PasswordStrength",
    "validate_password_strength",
]
