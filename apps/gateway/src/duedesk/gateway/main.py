"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 升级引擎配置 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from duedesk.core.config import get_db_path, load_escalation_config
from duedesk.core.store import create_store_group
from fastapi import FastAPI

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import escalations, health, notifications, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和配置，关闭时清理连接"""
    # 启动：初始化 Store
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    escalation_config = load_escalation_config()
    app.state.escalation_config = escalation_config
    log.info(
        "escalation_engine_initialized",
        db_path=db_path,
        timezone=escalation_config.timezone,
        tasks_link=escalation_config.tasks_link,
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="DueDesk Gateway",
        version="0.1.0",
        description="DueDesk 任务截止日期升级 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()
    setup_logfire()

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(escalations.router, tags=["escalations"])
    app.include_router(notifications.router, tags=["notifications"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
