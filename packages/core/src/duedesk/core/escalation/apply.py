"""升级执行 -- 将 Runner 的增量落盘并发送通知

流程（逐任务独立，互不影响）：
1. 条件更新 escalation_status（CAS），失败说明其他会话已推进，静默跳过
2. CAS 成功后写入配套通知；通知失败只记录，不回滚、不重试
"""

from datetime import datetime

import structlog

from ..config import EscalationConfig
from ..exceptions import EscalationConflictError
from ..models.escalation import EscalationReport
from ..store import StoreGroup
from ..store.transaction import advance_escalation, create_notification_once
from .runner import run_escalations

log = structlog.get_logger()


async def apply_escalations(
    store_group: StoreGroup,
    now: datetime,
    config: EscalationConfig | None = None,
) -> EscalationReport:
    """加载任务、执行一次升级评估并持久化

    Args:
        store_group: 当前会话的 Store 实例组
        now: 当前时刻（timezone-aware）
        config: 升级引擎配置，缺省使用默认值

    Returns:
        EscalationReport

    Raises:
        Exception: 加载任务失败时整体中止，由调用方决定是否重跑
    """
    config = config or EscalationConfig()
    try:
        tasks = await store_group.task_store.list_tasks()
    except Exception as e:
        log.error("escalation_fetch_failed", error_type=type(e).__name__)
        raise

    result = run_escalations(
        tasks,
        now,
        link_to=config.tasks_link,
        tz=config.tzinfo,
    )
    report = EscalationReport(checked=len(tasks))

    for transition in result.transitions:
        update = transition.update
        try:
            await advance_escalation(
                store_group.conn,
                store_group.task_store,
                update,
                now,
                write_lock=store_group.write_lock,
            )
        except EscalationConflictError:
            log.info(
                "escalation_conflict_skipped",
                task_id=update.task_id,
                expected_status=update.expected_status.value,
            )
            report.skipped.append(update.task_id)
            continue
        except Exception as e:
            log.error(
                "escalation_persist_failed",
                task_id=update.task_id,
                error_type=type(e).__name__,
            )
            report.failed.append(update.task_id)
            continue

        report.advanced.append(update.task_id)
        report.updated_tasks.append(
            transition.updated_task.model_copy(update={"updated_at": now})
        )
        log.info(
            "escalation_advanced",
            task_id=update.task_id,
            from_status=update.expected_status.value,
            to_status=update.new_status.value,
        )

        try:
            notification = await create_notification_once(
                store_group.conn,
                store_group.notification_store,
                transition.notification,
                now,
                write_lock=store_group.write_lock,
            )
        except Exception as e:
            log.error(
                "notification_emit_failed",
                task_id=update.task_id,
                recipient=transition.notification.user_id,
                error_type=type(e).__name__,
            )
            report.notify_failed.append(update.task_id)
            continue

        if notification is None:
            log.info(
                "notification_already_emitted",
                task_id=update.task_id,
                dedupe_key=transition.notification.dedupe_key,
            )

    return report

