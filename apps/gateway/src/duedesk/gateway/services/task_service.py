"""TaskService -- 任务增删改查与升级执行业务逻辑

职责：
1. 任务 CRUD（编辑永远不触碰 escalation_status）
2. 指派变更时发送 task_assigned 通知
3. 执行一次升级评估：条件更新落盘 + 通知
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from duedesk.core.config import EscalationConfig
from duedesk.core.escalation import compute_effective_deadline
from duedesk.core.escalation.apply import apply_escalations
from duedesk.core.exceptions import TaskNotFoundError
from duedesk.core.models import (
    DeadlineInfo,
    EscalationReport,
    NotificationRequest,
    NotificationType,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
)
from duedesk.core.store import StoreGroup
from duedesk.core.store.transaction import create_notification_once
from ulid import ULID

log = structlog.get_logger()

# 显式传 null 时忽略，不允许清空
_REQUIRED_FIELDS = frozenset({"name", "description", "priority", "status"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        config: EscalationConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._stores = store_group
        self._config = config or EscalationConfig()
        self._clock = clock or _utcnow

    async def fetch_tasks(self, status: str | None = None) -> list[Task]:
        """查询任务列表"""
        return await self._stores.task_store.list_tasks(status)

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情"""
        return await self._stores.task_store.get_task(task_id)

    async def create_task(self, data: TaskCreate) -> Task:
        """创建任务，初始 status=To Do、escalation_status=None

        有执行人时发送 task_assigned 通知。
        """
        now = self._clock()
        task = Task(
            task_id=str(ULID()),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        async with self._stores.write_lock:
            try:
                await self._stores.task_store.create_task(task)
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise

        log.info("task_created", task_id=task.task_id)
        if task.assigned_to_id:
            await self._notify_assignee(task)
        return task

    async def update_task(self, task_id: str, patch: TaskUpdate) -> Task:
        """部分更新任务

        只写回 patch 中显式给出的字段；执行人变化时通知新执行人。

        Raises:
            TaskNotFoundError: 任务不存在
        """
        changes = {
            field: getattr(patch, field)
            for field in patch.model_fields_set
            if getattr(patch, field) is not None or field not in _REQUIRED_FIELDS
        }
        async with self._stores.task_lock(task_id):
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            updated = task.model_copy(update={**changes, "updated_at": self._clock()})
            await self._save(updated)

        log.info("task_updated", task_id=task_id, fields=sorted(changes))
        if updated.assigned_to_id and updated.assigned_to_id != task.assigned_to_id:
            await self._notify_assignee(updated)
        # 升级状态可能在读取之后被其他会话推进，以库中为准
        return await self._stores.task_store.get_task(task_id) or updated

    async def complete_task(self, task_id: str, notes: str | None = None) -> Task:
        """标记任务完成并记录完成备注；完成后升级引擎不再处理

        Raises:
            TaskNotFoundError: 任务不存在
        """
        async with self._stores.task_lock(task_id):
            task = await self._stores.task_store.get_task(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            updated = task.model_copy(
                update={
                    "status": TaskStatus.DONE,
                    "completion_notes": notes,
                    "updated_at": self._clock(),
                }
            )
            await self._save(updated)
        log.info("task_completed", task_id=task_id)
        return await self._stores.task_store.get_task(task_id) or updated

    async def delete_task(self, task_id: str) -> None:
        """删除任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        async with self._stores.task_lock(task_id), self._stores.write_lock:
            try:
                deleted = await self._stores.task_store.delete_task(task_id)
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise
        self._stores.release_task_lock(task_id)
        if not deleted:
            raise TaskNotFoundError(task_id)
        log.info("task_deleted", task_id=task_id)

    def next_due(self, task: Task, now: datetime | None = None) -> DeadlineInfo:
        """任务列表"下一截止日期"列"""
        return compute_effective_deadline(
            task,
            now or self._clock(),
            self._config.tzinfo,
        )

    async def run_escalations(self, now: datetime | None = None) -> EscalationReport:
        """执行一次升级评估

        可重复调用：已推进的任务不会再次推进，通知不会重复发送。

        Raises:
            Exception: 加载任务失败（整体中止）
        """
        report = await apply_escalations(
            self._stores,
            now or self._clock(),
            self._config,
        )
        log.info(
            "escalation_run_completed",
            checked=report.checked,
            advanced=len(report.advanced),
            skipped=len(report.skipped),
            failed=len(report.failed),
            notify_failed=len(report.notify_failed),
        )
        return report

    async def _save(self, task: Task) -> None:
        async with self._stores.write_lock:
            try:
                found = await self._stores.task_store.update_task(task)
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise
        if not found:
            # 读取之后被并发删除
            raise TaskNotFoundError(task.task_id)

    async def _notify_assignee(self, task: Task) -> None:
        """发送指派通知；失败只记录日志，不影响任务写入"""
        request = NotificationRequest(
            user_id=task.assigned_to_id,
            message=f'You have been assigned a new task: "{task.name}"',
            type=NotificationType.TASK_ASSIGNED,
            link_to=self._config.tasks_link,
        )
        try:
            await create_notification_once(
                self._stores.conn,
                self._stores.notification_store,
                request,
                self._clock(),
                write_lock=self._stores.write_lock,
            )
        except Exception as e:
            log.error(
                "assignment_notification_failed",
                task_id=task.task_id,
                error_type=type(e).__name__,
            )
