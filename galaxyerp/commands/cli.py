"""GalaxyERP 命令行接口。

示例:
    galaxyerp server run --reload
    galaxyerp db init
    galaxyerp routes
"""

from __future__ import annotations

import asyncio

from fastapi.routing import APIRoute
from rich.console import Console
from rich.table import Table
from sqlalchemy.engine import make_url
import typer
import uvicorn

from galaxyerp.application.config import load_config
from galaxyerp.common.logging import setup_logging
from galaxyerp.core.database import DatabaseManager

console = Console()

app = typer.Typer(name="galaxyerp", help="GalaxyERP 后端管理工具", add_completion=False)
server_app = typer.Typer(name="server", help="ASGI 服务器管理", add_completion=False)
db_app = typer.Typer(name="db", help="数据库管理", add_completion=False)

app.add_typer(server_app, name="server")
app.add_typer(db_app, name="db")


def masked_url(url: str) -> str:
    """隐藏连接串中的密码。"""
    return make_url(url).render_as_string(hide_password=True)


@server_app.command()
def run(
    host: str | None = typer.Option(None, "--host", "-h", help="监听地址（默认读取配置）"),
    port: int | None = typer.Option(None, "--port", "-p", help="监听端口（默认读取配置）"),
    reload: bool = typer.Option(False, "--reload", help="启用热重载（开发模式）"),
    workers: int | None = typer.Option(None, "--workers", "-w", help="工作进程数"),
    env: str | None = typer.Option(None, "--env", "-e", help="运行环境 dev/test/prod"),
) -> None:
    """运行服务器。

    示例：

        galaxyerp server run --reload

        galaxyerp server run --workers 4 --env prod
    """
    config = load_config(env)
    host = host or config.server.host
    port = port or config.server.port
    workers = 1 if reload else (workers or config.server.workers)

    typer.echo("🚀 启动服务器...")
    typer.echo(f"   地址: http://{host}:{port}")
    typer.echo(f"   环境: {config.environment}")
    typer.echo(f"   工作进程: {workers}")
    typer.echo(f"   热重载: {'✅' if reload else '❌'}")

    try:
        uvicorn.run(
            "galaxyerp.main:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            workers=workers,
            timeout_graceful_shutdown=config.server.graceful_timeout,
        )
    except KeyboardInterrupt:
        typer.echo("\n👋 服务器已停止")


@db_app.command("init")
def init_db(
    env: str | None = typer.Option(None, "--env", "-e", help="运行环境 dev/test/prod"),
) -> None:
    """按模型定义创建所有数据表。"""
    config = load_config(env)
    setup_logging(log_level=config.log.level, enable_file=False)

    async def _init() -> None:
        database = DatabaseManager()
        await database.initialize(url=config.database.url, echo=config.database.echo)
        try:
            await database.create_all()
        finally:
            await database.cleanup()

    try:
        asyncio.run(_init())
    except Exception as exc:
        typer.echo(f"❌ 建表失败: {exc}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"✅ 数据表已创建: {masked_url(config.database.url)}")


@app.command()
def routes() -> None:
    """列出所有 API 路由。"""
    from galaxyerp.main import create_app

    config = load_config()
    config.log.enable_console = False
    config.log.enable_file = False
    application = create_app(config)

    table = Table(title="📝 API 路由", show_header=True, header_style="bold magenta")
    table.add_column("方法", style="cyan", width=8)
    table.add_column("路径", style="green")
    table.add_column("名称", style="yellow")

    for route in application.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods):
                table.add_row(method, route.path, route.name)

    console.print(table)


def main() -> None:
    """命令行入口函数。"""
    app()


if __name__ == "__main__":
    main()
