"""应用框架基类。

提供 ErpApplication 和 Component 基类。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, ClassVar

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from galaxyerp.application.config import AppConfig, load_config
from galaxyerp.application.interfaces.errors import ErrorPropagator
from galaxyerp.application.validation import Validator
from galaxyerp.common.logging import logger, setup_logging
from galaxyerp.core.database import DatabaseManager
from galaxyerp.utils.jwt import TokenService
from galaxyerp.utils.security import PasswordHasher

API_PREFIX = "/api/v1"


class Component(ABC):
    """应用组件基类。

    所有功能单元（中间件、数据库等）都是 Component，分两个阶段工作：

    - install: 应用构造时调用（同步），用于添加中间件、注册异常处理器；
      应用启动后不能再添加中间件
    - setup / teardown: 生命周期内调用（异步），用于初始化和释放资源

    使用示例:
        class AuditComponent(Component):
            name = "audit"
            depends_on = ["database"]

            async def setup(self, app: ErpApplication, config: AppConfig):
                ...

            async def teardown(self, app: ErpApplication):
                ...
    """

    name: str = "component"
    enabled: bool = True
    depends_on: ClassVar[list[str]] = []

    def can_enable(self, config: AppConfig) -> bool:
        """是否可以启用此组件。

        子类可以重写此方法以实现条件化启用。
        """
        return self.enabled

    def install(self, app: ErpApplication, config: AppConfig) -> None:
        """应用构造时调用。"""

    @abstractmethod
    async def setup(self, app: ErpApplication, config: AppConfig) -> None:
        """组件启动时调用。"""

    @abstractmethod
    async def teardown(self, app: ErpApplication) -> None:
        """组件关闭时调用。"""


class ErpApplication(FastAPI):
    """GalaxyERP 应用。

    构造时：
    1. 初始化日志
    2. 创建共享协作者（校验器、令牌服务、密码哈希器、数据库管理器、错误传播器）放入 app.state
    3. 安装组件（中间件按安装顺序由内向外包裹）
    4. 注册健康检查和 API 索引路由

    使用示例:
        class MyApp(ErpApplication):
            items = [
                DatabaseComponent,
                AuthenticationComponent,
                ErrorHandlingComponent,
                RequestLoggingComponent,
                CORSComponent,
            ]
    """

    # 默认组件列表（子类可以覆盖）
    items: ClassVar[list[type[Component] | Component]] = []

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        description: str | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = load_config()
        self._config = config

        # 初始化日志（必须在其他操作之前）
        setup_logging(
            log_level=config.log.level,
            log_dir=config.log.dir,
            enable_console=config.log.enable_console,
            enable_file=config.log.enable_file,
            retention_days=config.log.retention_days,
        )

        self._components: dict[str, Component] = {}

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """应用生命周期管理。"""
            await self._on_startup()
            yield
            await self._on_shutdown()

        super().__init__(
            title=config.app_name,
            version=config.version,
            description=description,
            lifespan=lifespan,
            **kwargs,
        )

        self.setup_state()
        self._register_components()
        self.setup_routes()

    def setup_state(self) -> None:
        """创建请求间共享的只读协作者。"""
        config = self._config
        self.state.config = config
        self.state.validator = Validator()
        self.state.token_service = TokenService(
            secret=config.jwt.secret,
            algorithm=config.jwt.algorithm,
            expire_hours=config.jwt.expire_hours,
        )
        self.state.password_hasher = PasswordHasher(rounds=config.security.bcrypt_rounds)
        self.state.database = DatabaseManager()
        self.state.error_propagator = ErrorPropagator()

    def _register_components(self) -> None:
        """注册并安装所有组件。"""
        for item in self.items:
            component = item() if isinstance(item, type) else item
            if component.can_enable(self._config):
                component.install(self, self._config)
                self._components[component.name] = component
                logger.debug(f"组件已注册: {component.name}")

    async def _on_startup(self) -> None:
        """启动所有组件。"""
        logger.info("应用启动中...")

        for component in self._topological_sort(list(self._components.values())):
            try:
                await component.setup(self, self._config)
                logger.info(f"组件启动成功: {component.name}")
            except Exception as exc:
                logger.error(f"组件启动失败 ({component.name}): {exc}")
                raise

        logger.info(f"{self._config.app_name} 启动完成 | 环境: {self._config.environment}")

    async def _on_shutdown(self) -> None:
        """关闭所有组件（逆序）。"""
        logger.info("应用关闭中...")

        for component in self._topological_sort(list(self._components.values()), reverse=True):
            try:
                await component.teardown(self)
                logger.info(f"组件关闭成功: {component.name}")
            except Exception as exc:
                logger.warning(f"组件关闭失败 ({component.name}): {exc}")

        logger.info("应用关闭完成")

    def _topological_sort(
        self,
        components: list[Component],
        reverse: bool = False,
    ) -> list[Component]:
        """拓扑排序组件。

        按照 depends_on 关系排序，确保依赖先启动。

        Args:
            components: 组件列表
            reverse: 是否反序（用于关闭）
        """
        component_map = {comp.name: comp for comp in components}
        visited: set[str] = set()
        result: list[Component] = []

        def visit(name: str, visiting: set[str]) -> None:
            if name in visited:
                return
            if name in visiting:
                logger.warning(f"检测到循环依赖: {name}")
                return

            visiting.add(name)
            for dep in component_map[name].depends_on:
                if dep in component_map:
                    visit(dep, visiting)
            visiting.remove(name)

            visited.add(name)
            result.append(component_map[name])

        for comp in components:
            visit(comp.name, set())

        if reverse:
            result.reverse()
        return result

    def setup_routes(self) -> None:
        """设置内置路由。

        子类可以重写此方法来自定义路由配置。
        """
        self.setup_health_check()
        self.setup_api_index()

    def setup_health_check(self) -> None:
        """健康检查端点（不需要认证）。"""
        if not self._config.health_check.enabled:
            logger.debug("健康检查端点已禁用")
            return

        @self.get(self._config.health_check.path, tags=["health"])
        async def health_check() -> JSONResponse:
            database: DatabaseManager = self.state.database
            if database.initialized and not await database.health_check():
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"status": "unhealthy", "message": "数据库连接异常"},
                )
            return JSONResponse(
                content={"status": "ok", "message": f"{self._config.app_name} is running"},
            )

    def setup_api_index(self) -> None:
        """API 版本索引。"""

        async def api_index() -> dict[str, str]:
            return {"message": f"{self._config.app_name} API v1"}

        self.add_api_route(API_PREFIX, api_index, methods=["GET"], include_in_schema=False)
        self.add_api_route(f"{API_PREFIX}/", api_index, methods=["GET"], tags=["index"])

    @property
    def config(self) -> AppConfig:
        """获取应用配置。"""
        return self._config

    @property
    def components(self) -> dict[str, Component]:
        """已启用的组件。"""
        return dict(self._components)


__all__ = [
    "API_PREFIX",
    "Component",
    "ErpApplication",
]
