"""Store Protocol 接口定义

定义 TaskStore、NotificationStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
任何持久化实现至少需要支持 escalation_status 的条件更新。
"""

from typing import Protocol

from ..models.enums import EscalationStatus
from ..models.notification import Notification
from ..models.task import Task


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        ...

    async def list_tasks(self, status: str | None = None) -> list[Task]:
        """查询任务列表，支持按状态筛选"""
        ...

    async def update_task(self, task: Task) -> bool:
        """写回用户可编辑字段（不含升级状态）"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """删除任务"""
        ...

    async def compare_and_set_escalation(
        self,
        task_id: str,
        expected_status: EscalationStatus,
        new_status: EscalationStatus,
        updated_at: str,
    ) -> bool:
        """条件更新升级状态（CAS）"""
        ...


class NotificationStore(Protocol):
    """Notification 存储接口

    dedupe_key 非空时必须唯一。
    """

    async def create_notification(self, notification: Notification) -> None:
        """写入通知"""
        ...

    async def get_notification(self, notification_id: str) -> Notification | None:
        """根据 notification_id 查询通知"""
        ...

    async def get_by_dedupe_key(self, dedupe_key: str) -> Notification | None:
        """根据去重键查询通知"""
        ...

    async def list_for_user(self, user_id: str) -> list[Notification]:
        """查询用户的通知"""
        ...

    async def mark_read(self, notification_id: str) -> bool:
        """标记单条已读"""
        ...

    async def mark_all_read(self, user_id: str) -> int:
        """标记全部已读"""
        ...
