"""JWT 令牌签发与校验。

仅支持 HMAC 系列算法（HS256/HS384/HS512），签名密钥来自配置。
令牌载荷：user_id、username、exp、iat、type。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field

HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class TokenType(str, Enum):
    """Token类型。"""

    ACCESS = "access"


class InvalidTokenError(Exception):
    """令牌无效（签名错误、算法不符、已过期或载荷缺失）。"""


class AccessTokenPayload(BaseModel):
    """访问Token载荷。"""

    model_config = ConfigDict(use_enum_values=True)

    user_id: int = Field(..., description="用户ID")
    username: str = Field(..., description="用户名")
    exp: datetime = Field(..., description="过期时间")
    iat: datetime = Field(default_factory=lambda: datetime.now(UTC), description="签发时间")
    type: TokenType = Field(default=TokenType.ACCESS, description="Token类型")

    def to_claims(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "exp": int(self.exp.timestamp()),
            "iat": int(self.iat.timestamp()),
            "type": self.type,
        }


@dataclass(frozen=True)
class Principal:
    """已认证主体，单个请求内只读。

    Attributes:
        subject_id: 用户ID
        username: 用户名
    """

    subject_id: int
    username: str


def _coerce_user_id(value: Any) -> int:
    # 数字型声明可能以浮点数形式出现
    if isinstance(value, bool):
        raise InvalidTokenError("user_id 类型错误")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise InvalidTokenError("user_id 类型错误")


class TokenService:
    """令牌服务。

    使用示例:
        service = TokenService(secret="...", algorithm="HS256", expire_hours=24)
        token, expires_at = service.issue(user_id=1, username="alice")
        principal = service.decode(token)
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_hours: int = 24) -> None:
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"不支持的签名算法: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_hours = expire_hours

    def issue(self, user_id: int, username: str) -> tuple[str, datetime]:
        """签发访问令牌。

        Returns:
            (令牌, 过期时间)
        """
        now = datetime.now(UTC)
        payload = AccessTokenPayload(
            user_id=user_id,
            username=username,
            iat=now,
            exp=now + timedelta(hours=self.expire_hours),
        )
        token = jwt.encode(payload.to_claims(), self._secret, algorithm=self.algorithm)
        return token, payload.exp

    def decode(self, token: str) -> Principal:
        """校验令牌并返回主体。

        Raises:
            InvalidTokenError: 令牌无效
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=HMAC_ALGORITHMS,
                options={"require_exp": True},
            )
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if claims.get("type", TokenType.ACCESS.value) != TokenType.ACCESS.value:
            raise InvalidTokenError("不是访问令牌")
        if "user_id" not in claims:
            raise InvalidTokenError("缺少 user_id")
        username = claims.get("username")
        if not isinstance(username, str):
            raise InvalidTokenError("缺少 username")
        return Principal(subject_id=_coerce_user_id(claims["user_id"]), username=username)

    def __repr__(self) -> str:
        return f"<TokenService algorithm={self.algorithm}>"


__all__ = [
    "HMAC_ALGORITHMS",
    "AccessTokenPayload",
    "InvalidTokenError",
    "Principal",
    "TokenService",
    "TokenType",
]
