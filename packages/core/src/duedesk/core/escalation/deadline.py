"""截止日期计算 -- 纯函数，无副作用

从原始 due_date 出发，按当前升级状态级联已配置的各级天数，
得到"生效截止日期"。比较以天为粒度，忽略时刻。
"""

from datetime import date, datetime, timedelta, tzinfo

from ..models.enums import (
    EscalationStatus,
    TaskStatus,
    escalation_rank,
    next_escalation_status,
)
from ..models.escalation import DeadlineInfo
from ..models.task import EscalationStage, Task


def as_day(moment: datetime | date, tz: tzinfo | None = None) -> date:
    """将时刻归一化为日期

    aware datetime 先换算到 tz（若给出）再取日期；date 原样返回。
    """
    if isinstance(moment, datetime):
        if tz is not None and moment.tzinfo is not None:
            moment = moment.astimezone(tz)
        return moment.date()
    return moment


def escalation_stages(task: Task) -> tuple[EscalationStage | None, ...]:
    """按顺序返回三级升级配置（未配置为 None）"""
    return (task.escalation_level1, task.escalation_level2, task.escalation_email)


def stage_for(task: Task, status: EscalationStatus) -> EscalationStage | None:
    """返回进入 status 所需的那一级配置；EscalationStatus.NONE 无对应配置"""
    rank = escalation_rank(status)
    if rank == 0:
        return None
    return escalation_stages(task)[rank - 1]


def escalation_threshold(task: Task, target: EscalationStatus) -> date | None:
    """进入 target 级别的阈值日期

    阈值 = due_date + 第 1..k 级天数之和；链条中任一级未配置则无阈值。
    """
    if task.due_date is None:
        return None
    rank = escalation_rank(target)
    days = 0
    for stage in escalation_stages(task)[:rank]:
        if stage is None:
            return None
        days += stage.duration_days
    return task.due_date + timedelta(days=days)


def compute_effective_deadline(
    task: Task,
    now: datetime | date,
    tz: tzinfo | None = None,
) -> DeadlineInfo:
    """计算当前生效的截止日期以及是否已逾期

    Args:
        task: 任务
        now: 当前时刻（注入，不读全局时钟）
        tz: 按天比较时使用的时区

    Returns:
        DeadlineInfo；已完成或无截止日期的任务永不逾期
    """
    if task.status == TaskStatus.DONE or task.due_date is None:
        return DeadlineInfo(deadline=task.due_date, is_overdue=False)

    target = next_escalation_status(task.escalation_status)
    if target is None:
        # Email Sent：没有后续阈值
        return DeadlineInfo(deadline=None, is_overdue=False)

    deadline = escalation_threshold(task, target)
    if deadline is None:
        if task.escalation_status != EscalationStatus.NONE:
            return DeadlineInfo(deadline=None, is_overdue=False)
        # 未配置一级升级：只有原始截止日期
        deadline = task.due_date

    return DeadlineInfo(deadline=deadline, is_overdue=as_day(now, tz) > deadline)
