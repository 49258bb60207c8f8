"""NotificationService -- 通知查询与已读标记"""

import structlog
from duedesk.core.models import Notification
from duedesk.core.store import StoreGroup

log = structlog.get_logger()


class NotificationService:
    """通知业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def list_for_user(self, user_id: str) -> tuple[list[Notification], int]:
        """查询用户通知

        Returns:
            (notifications, unread_count)，按 created_at 倒序
        """
        notifications = await self._stores.notification_store.list_for_user(user_id)
        unread = sum(1 for n in notifications if not n.is_read)
        return notifications, unread

    async def mark_read(self, notification_id: str) -> Notification | None:
        """标记单条已读，通知不存在返回 None"""
        async with self._stores.write_lock:
            try:
                found = await self._stores.notification_store.mark_read(notification_id)
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise
        if not found:
            return None
        return await self._stores.notification_store.get_notification(notification_id)

    async def mark_all_read(self, user_id: str) -> int:
        """标记用户全部通知已读，返回更新条数"""
        async with self._stores.write_lock:
            try:
                count = await self._stores.notification_store.mark_all_read(user_id)
                await self._stores.conn.commit()
            except Exception:
                await self._stores.conn.rollback()
                raise
        log.info("notifications_marked_read", user_id=user_id, count=count)
        return count
