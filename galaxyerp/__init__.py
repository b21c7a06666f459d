"""GalaxyERP - 模块化 ERP 后端。

模块结构：
- common: 最基础层（日志系统）
- core: 核心层（数据库、模型基类、事务）
- domain: 领域模型
- repositories: 数据访问层
- services: 业务服务层
- schemas: 请求/响应模型
- controllers: HTTP 控制器
- application: 应用层（配置、中间件、校验、错误处理、应用装配）
- utils: 工具（密码、JWT）
- commands: 命令行工具
"""

__version__ = "1.0.0"
