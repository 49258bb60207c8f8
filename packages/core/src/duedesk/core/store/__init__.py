"""DueDesk Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
每个 StoreGroup 对应一个会话（一条连接）。
"""

import asyncio
from pathlib import Path

import aiosqlite

from .notification_store import SqliteNotificationStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import advance_escalation, create_notification_once


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接

    连接上的事务不隔离：任意协程的 rollback/commit 都作用于整条连接。
    每个"写入 + commit/rollback"单元必须持有 write_lock；
    同一任务的读-改-写由 task_lock(task_id) 串行化。
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.task_store = SqliteTaskStore(conn)
        self.notification_store = SqliteNotificationStore(conn)
        self.write_lock = asyncio.Lock()
        self._task_locks: dict[str, asyncio.Lock] = {}

    def task_lock(self, task_id: str) -> asyncio.Lock:
        """获取 task 级别锁"""
        lock = self._task_locks.get(task_id)
        if lock is None:
            lock = asyncio.Lock()
            self._task_locks[task_id] = lock
        return lock

    def release_task_lock(self, task_id: str) -> None:
        """任务删除或完成后清理 lock，避免字典无限增长"""
        lock = self._task_locks.get(task_id)
        if lock is not None and not lock.locked():
            self._task_locks.pop(task_id, None)


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteTaskStore",
    "SqliteNotificationStore",
    "init_db",
    "advance_escalation",
    "create_notification_once",
]
