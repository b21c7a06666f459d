"""应用配置。

使用 pydantic-settings 进行分层配置管理：
- 每个配置段是独立的 BaseSettings，拥有自己的环境变量前缀
- GALAXYERP_ENV（dev/test/prod）决定读取哪个 env 文件
- 环境变量优先级高于 env 文件
"""

from __future__ import annotations

from enum import Enum
import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_VAR = "GALAXYERP_ENV"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Environment(str, Enum):
    """运行环境。"""

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class DatabaseSettings(BaseSettings):
    """数据库配置。

    环境变量前缀: DATABASE_
    示例: DATABASE_URL, DATABASE_ECHO, DATABASE_POOL_SIZE
    """

    url: str = Field(
        default="sqlite+aiosqlite:///./galaxyerp.db",
        description="数据库连接字符串（生产环境使用 postgresql+asyncpg）"
    )
    echo: bool = Field(
        default=False,
        description="是否输出 SQL 语句"
    )
    pool_size: int = Field(
        default=5,
        description="数据库连接池大小"
    )
    max_overflow: int = Field(
        default=10,
        description="连接池最大溢出连接数"
    )
    pool_timeout: int = Field(
        default=30,
        description="获取连接超时时间（秒）"
    )
    pool_recycle: int = Field(
        default=3600,
        description="连接回收时间（秒）"
    )
    auto_create: bool = Field(
        default=True,
        description="启动时是否自动建表"
    )

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )


class ServerSettings(BaseSettings):
    """服务器配置。

    环境变量前缀: SERVER_
    """

    host: str = Field(
        default="127.0.0.1",
        description="服务器监听地址"
    )
    port: int = Field(
        default=8080,
        description="服务器监听端口"
    )
    reload: bool = Field(
        default=False,
        description="是否启用热重载"
    )
    workers: int = Field(
        default=1,
        description="工作进程数"
    )
    graceful_timeout: int = Field(
        default=5,
        description="优雅关闭等待时间（秒）"
    )

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        case_sensitive=False,
        extra="ignore",
    )


class JWTSettings(BaseSettings):
    """JWT 配置。

    环境变量前缀: JWT_
    """

    secret: str = Field(
        default="galaxyerp-dev-secret-change-me",
        description="HMAC 签名密钥"
    )
    algorithm: str = Field(
        default="HS256",
        description="签名算法（仅支持 HMAC 系列）"
    )
    expire_hours: int = Field(
        default=24,
        ge=1,
        description="访问令牌有效期（小时）"
    )

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, value: str) -> str:
        value = value.upper()
        if value not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT 算法必须是 {', '.join(HMAC_ALGORITHMS)} 之一")
        return value


class SecuritySettings(BaseSettings):
    """安全配置。

    环境变量前缀: SECURITY_
    """

    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt 哈希轮数"
    )

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_",
        case_sensitive=False,
        extra="ignore",
    )


class CORSSettings(BaseSettings):
    """CORS配置。

    环境变量前缀: CORS_
    """

    origins: list[str] = Field(
        default=["*"],
        description="允许的CORS源"
    )
    allow_credentials: bool = Field(
        default=True,
        description="是否允许CORS凭据"
    )
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="允许的CORS方法"
    )
    allow_headers: list[str] = Field(
        default=["Origin", "Content-Type", "Accept", "Authorization", "X-Request-ID"],
        description="允许的CORS头"
    )

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        case_sensitive=False,
        extra="ignore",
    )


class LogSettings(BaseSettings):
    """日志配置。

    环境变量前缀: LOG_
    示例: LOG_LEVEL, LOG_DIR
    """

    level: str = Field(
        default="INFO",
        description="日志级别"
    )
    dir: str = Field(
        default="log",
        description="日志目录"
    )
    enable_console: bool = Field(
        default=True,
        description="是否输出到控制台"
    )
    enable_file: bool = Field(
        default=True,
        description="是否写入日志文件"
    )
    retention_days: int = Field(
        default=7,
        description="日志保留天数"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
        extra="ignore",
    )


class HealthCheckSettings(BaseSettings):
    """健康检查配置。

    环境变量前缀: HEALTH_CHECK_
    """

    path: str = Field(
        default="/health",
        description="健康检查端点路径"
    )
    enabled: bool = Field(
        default=True,
        description="是否启用健康检查端点"
    )

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_CHECK_",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig(BaseSettings):
    """应用配置。

    使用 pydantic-settings 从环境变量和 env 文件加载配置，
    env 文件由 load_config 根据 GALAXYERP_ENV 选择。
    """

    env: Environment = Field(default=Environment.DEV, description="运行环境")
    app_name: str = Field(default="GalaxyERP", description="应用名称")
    version: str = Field(default="1.0.0", description="应用版本")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    health_check: HealthCheckSettings = Field(default_factory=HealthCheckSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def environment(self) -> str:
        """运行环境名称。"""
        return self.env.value

    @property
    def is_production(self) -> bool:
        """是否为生产环境。"""
        return self.env == Environment.PROD


_SECTIONS: dict[str, type[BaseSettings]] = {
    "database": DatabaseSettings,
    "server": ServerSettings,
    "jwt": JWTSettings,
    "security": SecuritySettings,
    "cors": CORSSettings,
    "log": LogSettings,
    "health_check": HealthCheckSettings,
}


def resolve_environment(value: str | None = None) -> Environment:
    """解析运行环境，未知值回退到 dev。"""
    raw = (value if value is not None else os.getenv(ENV_VAR, "")).strip().lower()
    try:
        return Environment(raw)
    except ValueError:
        return Environment.DEV


def env_file_for(env: Environment) -> Path:
    """返回环境对应的 env 文件路径。"""
    if env == Environment.PROD:
        return Path(".env")
    return Path("configs") / f"{env.value}.env"


def load_config(env: str | None = None, **overrides) -> AppConfig:
    """加载应用配置。

    Args:
        env: 运行环境，默认读取 GALAXYERP_ENV
        **overrides: 直接覆盖的配置项（主要用于测试）

    Returns:
        AppConfig: 配置实例
    """
    environment = resolve_environment(env)
    env_file = env_file_for(environment)
    # 各配置段独立读取同一个 env 文件
    for name, section_cls in _SECTIONS.items():
        if name not in overrides:
            overrides[name] = section_cls(_env_file=env_file)
    return AppConfig(_env_file=env_file, env=environment, **overrides)


__all__ = [
    "ENV_VAR",
    "HMAC_ALGORITHMS",
    "AppConfig",
    "CORSSettings",
    "DatabaseSettings",
    "Environment",
    "HealthCheckSettings",
    "JWTSettings",
    "LogSettings",
    "SecuritySettings",
    "ServerSettings",
    "env_file_for",
    "load_config",
    "resolve_environment",
]
