"""升级引擎的输入/输出类型

DeadlineInfo: 截止日期计算结果
EscalationUpdate: 发给持久化层的条件更新请求（CAS）
EscalationTransition / EscalationRunResult: Runner 产出的增量
EscalationReport: TaskService 执行一次升级后的逐任务结果
"""

from datetime import date

from pydantic import BaseModel, Field

from .enums import EscalationStatus
from .notification import NotificationRequest
from .task import Task


class DeadlineInfo(BaseModel):
    """当前生效的截止日期"""

    deadline: date | None = Field(default=None, description="生效截止日期，无下一阈值时为 None")
    is_overdue: bool = Field(default=False, description="是否已超过生效截止日期")


class EscalationUpdate(BaseModel):
    """条件更新请求：仅当存储中的值仍为 expected_status 时写入 new_status"""

    task_id: str
    expected_status: EscalationStatus
    new_status: EscalationStatus


class EscalationTransition(BaseModel):
    """单个任务的一次升级"""

    update: EscalationUpdate
    updated_task: Task
    notification: NotificationRequest


class EscalationRunResult(BaseModel):
    """一次 Runner 执行的全部增量（Runner 本身不落盘）"""

    transitions: list[EscalationTransition] = Field(default_factory=list)

    @property
    def updated_tasks(self) -> list[Task]:
        """推进后的任务副本（仅 escalation_status 变化）"""
        return [t.updated_task for t in self.transitions]

    @property
    def notifications(self) -> list[NotificationRequest]:
        """每次推进配套的一条通知请求"""
        return [t.notification for t in self.transitions]

    @property
    def updates(self) -> list[EscalationUpdate]:
        """待执行的条件更新（CAS）请求"""
        return [t.update for t in self.transitions]


class EscalationReport(BaseModel):
    """升级执行报告

    - advanced: 本次成功推进并已写库的任务
    - skipped: 条件更新失败（其他会话已推进），静默丢弃
    - failed: 写库失败，可整体重跑
    - notify_failed: 已推进但通知发送失败（不回滚、不重试）
    """

    checked: int = Field(default=0, description="参与评估的任务数")
    advanced: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    notify_failed: list[str] = Field(default_factory=list)
    updated_tasks: list[Task] = Field(default_factory=list)
