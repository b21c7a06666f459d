"""工具模块：令牌与安全。"""

from .jwt import InvalidTokenError, Principal, TokenService
from .security import PasswordHasher, PasswordPolicy, validate_password_strength

__all__ = [
    "InvalidTokenError",
    "PasswordHasher",
    "PasswordPolicy",
    "Principal",
    "TokenService",
    "validate_password_strength",
]
