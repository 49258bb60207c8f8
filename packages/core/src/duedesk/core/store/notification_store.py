"""NotificationStore SQLite 实现

notifications.dedupe_key 唯一约束保证同一升级通知只落盘一次。
此处不自动提交事务，由调用方管理。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import NotificationType
from ..models.notification import Notification

_SELECT_NOTIFICATIONS = (
    "SELECT notification_id, user_id, message, type, is_read, created_at, "
    "link_to, dedupe_key FROM notifications"
)


class SqliteNotificationStore:
    """NotificationStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_notification(self, notification: Notification) -> None:
        """写入通知；dedupe_key 重复时抛出 aiosqlite.IntegrityError"""
        await self._conn.execute(
            """
            INSERT INTO notifications (notification_id, user_id, message, type,
                                       is_read, created_at, link_to, dedupe_key)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                notification.notification_id,
                notification.user_id,
                notification.message,
                notification.type.value,
                int(notification.is_read),
                notification.created_at.isoformat(),
                notification.link_to,
                notification.dedupe_key,
            ),
        )

    async def get_notification(self, notification_id: str) -> Notification | None:
        """根据 notification_id 查询通知"""
        cursor = await self._conn.execute(
            f"{_SELECT_NOTIFICATIONS} WHERE notification_id = ?",
            (notification_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_notification(row)

    async def get_by_dedupe_key(self, dedupe_key: str) -> Notification | None:
        """根据去重键查询通知"""
        cursor = await self._conn.execute(
            f"{_SELECT_NOTIFICATIONS} WHERE dedupe_key = ? LIMIT 1",
            (dedupe_key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_notification(row)

    async def list_for_user(self, user_id: str) -> list[Notification]:
        """查询用户的通知，按 created_at 倒序"""
        cursor = await self._conn.execute(
            f"{_SELECT_NOTIFICATIONS} WHERE user_id = ? ORDER BY created_at DESC",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_notification(row) for row in rows]

    async def mark_read(self, notification_id: str) -> bool:
        """标记单条已读

        Returns:
            True 如果通知存在
        """
        cursor = await self._conn.execute(
            "UPDATE notifications SET is_read = 1 WHERE notification_id = ?",
            (notification_id,),
        )
        return cursor.rowcount > 0

    async def mark_all_read(self, user_id: str) -> int:
        """标记用户全部未读通知为已读，返回更新条数"""
        cursor = await self._conn.execute(
            "UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0",
            (user_id,),
        )
        return cursor.rowcount

    @staticmethod
    def _row_to_notification(row: aiosqlite.Row) -> Notification:
        """将数据库行转换为 Notification 模型"""
        return Notification(
            notification_id=row[0],
            user_id=row[1],
            message=row[2],
            type=NotificationType(row[3]),
            is_read=bool(row[4]),
            created_at=datetime.fromisoformat(row[5]),
            link_to=row[6],
            dedupe_key=row[7],
        )
