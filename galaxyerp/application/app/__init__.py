"""应用框架。"""

from .base import API_PREFIX, Component, ErpApplication
from .components import (
    AuthenticationComponent,
    CORSComponent,
    DatabaseComponent,
    ErrorHandlingComponent,
    RequestLoggingComponent,
)

__all__ = [
    "API_PREFIX",
    "AuthenticationComponent",
    "CORSComponent",
    "Component",
    "DatabaseComponent",
    "ErpApplication",
    "ErrorHandlingComponent",
    "RequestLoggingComponent",
]
