"""配置管理模块。"""

from .settings import (
    AppConfig,
    CORSSettings,
    DatabaseSettings,
    Environment,
    HealthCheckSettings,
    JWTSettings,
    LogSettings,
    SecuritySettings,
    ServerSettings,
    load_config,
    resolve_environment,
)

__all__ = [
    "AppConfig",
    "CORSSettings",
    "DatabaseSettings",
    "Environment",
    "HealthCheckSettings",
    "JWTSettings",
    "LogSettings",
    "SecuritySettings",
    "ServerSettings",
    "load_config",
    "resolve_environment",
]
