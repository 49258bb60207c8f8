"""升级 Runner -- 编排截止日期计算与流转判定

对整个任务列表执行一次评估，返回需要推进的任务副本和配套的通知请求。
Runner 不落盘：相同输入重复调用得到相同结果，持久化与通知由调用方负责。
"""

from collections.abc import Iterable
from datetime import date, datetime, tzinfo

import structlog

from ..config import NOTIFICATION_NAME_MAX_LENGTH
from ..models.enums import EscalationStatus, NotificationType
from ..models.escalation import EscalationRunResult, EscalationTransition, EscalationUpdate
from ..models.notification import NotificationRequest
from ..models.task import Task
from .deadline import stage_for
from .resolver import resolve_transition

log = structlog.get_logger()


def escalation_dedupe_key(task_id: str, status: EscalationStatus) -> str:
    """升级通知去重键：同一任务同一级别只通知一次"""
    return f"escalation:{task_id}:{status.value}"


def build_escalation_message(task: Task, status: EscalationStatus) -> str:
    """生成升级通知正文"""
    name = task.name[:NOTIFICATION_NAME_MAX_LENGTH]
    if status == EscalationStatus.EMAIL_SENT:
        return f'Final escalation: task "{name}" is overdue and still not completed.'
    return f'Task "{name}" is overdue and has been escalated to you ({status.value}).'


def build_transition(
    task: Task,
    target: EscalationStatus,
    link_to: str,
) -> EscalationTransition:
    """为一次升级构造任务副本、条件更新请求和通知请求"""
    stage = stage_for(task, target)
    if stage is None:
        raise ValueError(f"stage {target.value} is not configured for task {task.task_id}")

    return EscalationTransition(
        update=EscalationUpdate(
            task_id=task.task_id,
            expected_status=task.escalation_status,
            new_status=target,
        ),
        updated_task=task.model_copy(update={"escalation_status": target}),
        notification=NotificationRequest(
            user_id=stage.target,
            message=build_escalation_message(task, target),
            type=NotificationType.TASK_ESCALATED,
            link_to=link_to,
            dedupe_key=escalation_dedupe_key(task.task_id, target),
        ),
    )


def run_escalations(
    tasks: Iterable[Task],
    now: datetime | date,
    *,
    link_to: str = "/tasks",
    tz: tzinfo | None = None,
) -> EscalationRunResult:
    """对任务列表执行一次升级评估

    Args:
        tasks: 当前任务列表
        now: 当前时刻（注入）
        link_to: 通知中的任务列表深链接
        tz: 按天比较时使用的时区

    Returns:
        EscalationRunResult，每个需要推进的任务恰好一条 transition
    """
    result = EscalationRunResult()
    for task in tasks:
        target = resolve_transition(task, now, tz)
        if target is None:
            continue
        result.transitions.append(build_transition(task, target, link_to))
        log.debug(
            "escalation_resolved",
            task_id=task.task_id,
            from_status=task.escalation_status.value,
            to_status=target.value,
        )
    return result
