"""升级流转判定

每次评估最多前进一级：即使任务已越过多个阈值，也只推进到下一级，
后续级别依赖下一次调用。不跳级、不回退。
"""

from datetime import date, datetime, tzinfo

from ..models.enums import (
    EscalationStatus,
    TaskStatus,
    next_escalation_status,
    validate_escalation_transition,
)
from ..models.task import Task
from .deadline import as_day, compute_effective_deadline, stage_for


def resolve_transition(
    task: Task,
    now: datetime | date,
    tz: tzinfo | None = None,
) -> EscalationStatus | None:
    """判定任务是否应推进升级状态

    Args:
        task: 任务
        now: 当前时刻
        tz: 按天比较时使用的时区

    Returns:
        目标升级状态；None 表示不变
    """
    if task.status == TaskStatus.DONE:
        return None

    target = next_escalation_status(task.escalation_status)
    if target is None:
        return None

    # 时钟异常：当前时间早于创建时间
    if as_day(now, tz) < as_day(task.created_at, tz):
        return None

    info = compute_effective_deadline(task, now, tz)
    if not info.is_overdue:
        return None

    # 目标级别未配置：升级链到此为止
    if stage_for(task, target) is None:
        return None

    if not validate_escalation_transition(task.escalation_status, target):
        return None
    return target
