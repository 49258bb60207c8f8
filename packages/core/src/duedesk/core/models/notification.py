"""Notification Domain Model

升级通知按 (task, 升级级别) 至多创建一次，由 dedupe_key 唯一约束兜底。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import NotificationType


class NotificationRequest(BaseModel):
    """通知创建请求（尚未落盘）"""

    user_id: str = Field(description="接收者：用户 ID 或邮箱地址")
    message: str = Field(description="通知正文")
    type: NotificationType = Field(description="通知类型")
    link_to: str | None = Field(default=None, description="深链接，如 /tasks")
    dedupe_key: str | None = Field(
        default=None,
        description="去重键，带副作用的升级通知必填",
    )


class Notification(BaseModel):
    """Notification 数据模型"""

    notification_id: str = Field(description="唯一标识，ULID 格式")
    user_id: str = Field(description="接收者")
    message: str = Field(description="通知正文")
    type: NotificationType = Field(description="通知类型")
    is_read: bool = Field(default=False, description="是否已读")
    created_at: datetime = Field(description="创建时间")
    link_to: str | None = Field(default=None, description="深链接")
    dedupe_key: str | None = Field(default=None, description="去重键")
