"""SQLite 数据库初始化

PRAGMA 配置 + tasks / notifications 两张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# tasks 表 DDL（升级配置按扁平列存储，读取时组装为 EscalationStage）
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    task_id                          TEXT PRIMARY KEY,
    created_at                       TEXT NOT NULL,
    updated_at                       TEXT NOT NULL,
    name                             TEXT NOT NULL DEFAULT '',
    description                      TEXT NOT NULL DEFAULT '',
    priority                         TEXT NOT NULL DEFAULT 'Medium',
    status                           TEXT NOT NULL DEFAULT 'To Do',
    due_date                         TEXT,
    assigned_to_id                   TEXT,
    assigned_to_name                 TEXT,
    completion_notes                 TEXT,
    escalation_status                TEXT NOT NULL DEFAULT 'None',
    escalation_level1_user_id        TEXT,
    escalation_level1_duration_days  INTEGER,
    escalation_level2_user_id        TEXT,
    escalation_level2_duration_days  INTEGER,
    escalation_email                 TEXT,
    escalation_email_duration_days   INTEGER
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date, status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# notifications 表 DDL
_NOTIFICATIONS_DDL = """
CREATE TABLE IF NOT EXISTS notifications (
    notification_id  TEXT PRIMARY KEY,
    user_id          TEXT NOT NULL,
    message          TEXT NOT NULL,
    type             TEXT NOT NULL,
    is_read          INTEGER NOT NULL DEFAULT 0,
    created_at       TEXT NOT NULL,
    link_to          TEXT,
    dedupe_key       TEXT
);
"""

_NOTIFICATIONS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, created_at DESC);",
    # 去重键唯一约束（仅对非 NULL 值生效）
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_notifications_dedupe_key "
        "ON notifications(dedupe_key) WHERE dedupe_key IS NOT NULL;"
    ),
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_TASKS_DDL)
    await conn.execute(_NOTIFICATIONS_DDL)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _NOTIFICATIONS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
