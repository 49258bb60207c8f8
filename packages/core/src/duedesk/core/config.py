"""配置模块 -- 可通过环境变量覆盖

包含数据库路径以及升级引擎配置（任务列表深链接、按天比较所用时区）。
"""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("DUEDESK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "DUEDESK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "duedesk.db"),
    )


# 任务标题在通知正文中的最大长度
NOTIFICATION_NAME_MAX_LENGTH: int = 120


class EscalationConfig(BaseModel):
    """升级引擎配置 -- 从环境变量加载

    环境变量:
        DUEDESK_TASKS_LINK: 升级通知中的任务列表深链接（默认 /tasks）
        DUEDESK_TIMEZONE: 按天比较截止日期时使用的时区（默认 UTC）
    """

    tasks_link: str = Field(default="/tasks", description="任务列表深链接")
    timezone: str = Field(default="UTC", description="IANA 时区名")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def load_escalation_config() -> EscalationConfig:
    """从环境变量加载升级引擎配置

    非法时区不阻塞启动，记录警告后回退到 UTC。

    Returns:
        EscalationConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("DUEDESK_TASKS_LINK"):
        kwargs["tasks_link"] = val

    if val := os.environ.get("DUEDESK_TIMEZONE"):
        try:
            ZoneInfo(val)
            kwargs["timezone"] = val
        except (ZoneInfoNotFoundError, ValueError):
            log.warning(
                "invalid_timezone_config",
                env_var="DUEDESK_TIMEZONE",
                value=val,
                fallback="UTC",
            )

    return EscalationConfig(**kwargs)
