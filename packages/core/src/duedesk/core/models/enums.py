"""枚举定义

包含 TaskStatus、TaskPriority、EscalationStatus 升级状态机、NotificationType，
以及 VALID_ESCALATION_TRANSITIONS 合法流转映射和 TERMINAL_ESCALATION_STATES 终态集合。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 工作状态"""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(StrEnum):
    """Task 优先级"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EscalationStatus(StrEnum):
    """升级状态机：None < Level 1 < Level 2 < Email Sent"""

    NONE = "None"
    LEVEL1 = "Level 1"
    LEVEL2 = "Level 2"
    EMAIL_SENT = "Email Sent"


class NotificationType(StrEnum):
    """通知类型"""

    TASK_ASSIGNED = "task_assigned"
    TASK_ESCALATED = "task_escalated"


# 升级顺序（下标即等级）
ESCALATION_ORDER: tuple[EscalationStatus, ...] = (
    EscalationStatus.NONE,
    EscalationStatus.LEVEL1,
    EscalationStatus.LEVEL2,
    EscalationStatus.EMAIL_SENT,
)

# 每次只允许前进一级，不允许跳级或回退
VALID_ESCALATION_TRANSITIONS: dict[EscalationStatus, set[EscalationStatus]] = {
    EscalationStatus.NONE: {EscalationStatus.LEVEL1},
    EscalationStatus.LEVEL1: {EscalationStatus.LEVEL2},
    EscalationStatus.LEVEL2: {EscalationStatus.EMAIL_SENT},
    # 终态不可再流转
    EscalationStatus.EMAIL_SENT: set(),
}

TERMINAL_ESCALATION_STATES: set[EscalationStatus] = {
    EscalationStatus.EMAIL_SENT,
}


def escalation_rank(status: EscalationStatus) -> int:
    """返回升级状态的序号（None=0 ... Email Sent=3）"""
    return ESCALATION_ORDER.index(status)


def next_escalation_status(status: EscalationStatus) -> EscalationStatus | None:
    """返回下一级升级状态，终态返回 None"""
    if status in TERMINAL_ESCALATION_STATES:
        return None
    return ESCALATION_ORDER[escalation_rank(status) + 1]


def validate_escalation_transition(
    from_status: EscalationStatus,
    to_status: EscalationStatus,
) -> bool:
    """验证升级流转是否合法

    Args:
        from_status: 当前升级状态
        to_status: 目标升级状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_ESCALATION_TRANSITIONS.get(from_status, set())
    return to_status in allowed
