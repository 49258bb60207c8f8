"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与配置

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from duedesk.core.config import EscalationConfig
from duedesk.core.store import StoreGroup
from fastapi import Request


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_escalation_config(request: Request) -> EscalationConfig:
    """从 app.state 获取升级引擎配置，未初始化时使用默认值"""
    return getattr(request.app.state, "escalation_config", None) or EscalationConfig()
