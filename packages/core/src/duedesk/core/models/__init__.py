"""DueDesk Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    ESCALATION_ORDER,
    TERMINAL_ESCALATION_STATES,
    VALID_ESCALATION_TRANSITIONS,
    EscalationStatus,
    NotificationType,
    TaskPriority,
    TaskStatus,
    escalation_rank,
    next_escalation_status,
    validate_escalation_transition,
)
from .escalation import (
    DeadlineInfo,
    EscalationReport,
    EscalationRunResult,
    EscalationTransition,
    EscalationUpdate,
)
from .notification import Notification, NotificationRequest
from .task import EscalationStage, Task, TaskCreate, TaskUpdate

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "EscalationStatus",
    "NotificationType",
    # 升级状态机
    "ESCALATION_ORDER",
    "VALID_ESCALATION_TRANSITIONS",
    "TERMINAL_ESCALATION_STATES",
    "escalation_rank",
    "next_escalation_status",
    "validate_escalation_transition",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "EscalationStage",
    # Notification
    "Notification",
    "NotificationRequest",
    # Escalation
    "DeadlineInfo",
    "EscalationUpdate",
    "EscalationTransition",
    "EscalationRunResult",
    "EscalationReport",
]
