"""升级写入的事务封装

advance_escalation: 升级状态 CAS 写入，未命中抛出 EscalationConflictError
create_notification_once: 按 dedupe_key 幂等写入通知

两者各自独立提交：通知失败不回滚已推进的升级状态。
共享连接上 commit/rollback 作用于整条连接，两者都在 write_lock 内完成写入与提交。
"""

import asyncio
from datetime import datetime

import aiosqlite
from ulid import ULID

from ..exceptions import EscalationConflictError
from ..models.escalation import EscalationUpdate
from ..models.notification import Notification, NotificationRequest
from .protocols import NotificationStore, TaskStore


def is_dedupe_conflict(error: Exception) -> bool:
    """判断 IntegrityError 是否由 dedupe_key 唯一约束触发"""
    if not isinstance(error, aiosqlite.IntegrityError):
        return False
    text = str(error)
    return "idx_notifications_dedupe_key" in text or "notifications.dedupe_key" in text


async def advance_escalation(
    conn: aiosqlite.Connection,
    task_store: TaskStore,
    update: EscalationUpdate,
    updated_at: datetime,
    *,
    write_lock: asyncio.Lock,
) -> None:
    """在单个事务内条件推进升级状态

    Args:
        conn: 数据库连接
        task_store: TaskStore 实例
        update: 条件更新请求
        updated_at: 写入的更新时间
        write_lock: 连接级写锁（StoreGroup.write_lock）

    Raises:
        EscalationConflictError: 存储中的升级状态已不是 expected_status
        Exception: 其他写入失败，自动回滚
    """
    async with write_lock:
        try:
            applied = await task_store.compare_and_set_escalation(
                task_id=update.task_id,
                expected_status=update.expected_status,
                new_status=update.new_status,
                updated_at=updated_at.isoformat(),
            )
            if applied:
                await conn.commit()
        except Exception:
            await conn.rollback()
            raise
    # 未命中时没有写入任何行，无需回滚
    if not applied:
        raise EscalationConflictError(update.task_id, update.expected_status.value)


async def create_notification_once(
    conn: aiosqlite.Connection,
    notification_store: NotificationStore,
    request: NotificationRequest,
    created_at: datetime,
    *,
    write_lock: asyncio.Lock,
) -> Notification | None:
    """写入通知并提交

    Returns:
        新写入的 Notification；dedupe_key 已存在时返回 None（视为已送达）
    """
    notification = Notification(
        notification_id=str(ULID()),
        user_id=request.user_id,
        message=request.message,
        type=request.type,
        created_at=created_at,
        link_to=request.link_to,
        dedupe_key=request.dedupe_key,
    )
    async with write_lock:
        try:
            await notification_store.create_notification(notification)
            await conn.commit()
        except aiosqlite.IntegrityError as e:
            await conn.rollback()
            if is_dedupe_conflict(e):
                return None
            raise
        except Exception:
            await conn.rollback()
            raise
    return notification
