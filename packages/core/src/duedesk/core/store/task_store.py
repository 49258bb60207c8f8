"""TaskStore SQLite 实现

escalation_status 列只能通过 compare_and_set_escalation 条件更新，
普通编辑（update_task）不会覆盖它。
此处不自动提交事务，由调用方管理。
"""

from datetime import date, datetime

import aiosqlite

from ..models.enums import EscalationStatus
from ..models.task import EscalationStage, Task

_TASK_COLUMNS = (
    "task_id",
    "created_at",
    "updated_at",
    "name",
    "description",
    "priority",
    "status",
    "due_date",
    "assigned_to_id",
    "assigned_to_name",
    "completion_notes",
    "escalation_status",
    "escalation_level1_user_id",
    "escalation_level1_duration_days",
    "escalation_level2_user_id",
    "escalation_level2_duration_days",
    "escalation_email",
    "escalation_email_duration_days",
)

_SELECT_TASKS = f"SELECT {', '.join(_TASK_COLUMNS)} FROM tasks"


def _stage_columns(stage: EscalationStage | None) -> tuple[str | None, int | None]:
    if stage is None:
        return None, None
    return stage.target, stage.duration_days


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """创建任务记录"""
        placeholders = ", ".join("?" for _ in _TASK_COLUMNS)
        await self._conn.execute(
            f"INSERT INTO tasks ({', '.join(_TASK_COLUMNS)}) VALUES ({placeholders})",
            (
                task.task_id,
                task.created_at.isoformat(),
                task.updated_at.isoformat(),
                task.name,
                task.description,
                task.priority.value,
                task.status.value,
                task.due_date.isoformat() if task.due_date else None,
                task.assigned_to_id,
                task.assigned_to_name,
                task.completion_notes,
                task.escalation_status.value,
                *_stage_columns(task.escalation_level1),
                *_stage_columns(task.escalation_level2),
                *_stage_columns(task.escalation_email),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务"""
        cursor = await self._conn.execute(
            f"{_SELECT_TASKS} WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self, status: str | None = None) -> list[Task]:
        """查询任务列表，支持按状态筛选，按 created_at 倒序"""
        if status:
            cursor = await self._conn.execute(
                f"{_SELECT_TASKS} WHERE status = ? ORDER BY created_at DESC",
                (status,),
            )
        else:
            cursor = await self._conn.execute(
                f"{_SELECT_TASKS} ORDER BY created_at DESC"
            )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> bool:
        """写回用户可编辑的字段（不含 escalation_status、created_at）

        Returns:
            True 如果任务存在并已更新
        """
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET updated_at = ?, name = ?, description = ?, priority = ?,
                status = ?, due_date = ?, assigned_to_id = ?,
                assigned_to_name = ?, completion_notes = ?,
                escalation_level1_user_id = ?, escalation_level1_duration_days = ?,
                escalation_level2_user_id = ?, escalation_level2_duration_days = ?,
                escalation_email = ?, escalation_email_duration_days = ?
            WHERE task_id = ?
            """,
            (
                task.updated_at.isoformat(),
                task.name,
                task.description,
                task.priority.value,
                task.status.value,
                task.due_date.isoformat() if task.due_date else None,
                task.assigned_to_id,
                task.assigned_to_name,
                task.completion_notes,
                *_stage_columns(task.escalation_level1),
                *_stage_columns(task.escalation_level2),
                *_stage_columns(task.escalation_email),
                task.task_id,
            ),
        )
        return cursor.rowcount > 0

    async def delete_task(self, task_id: str) -> bool:
        """删除任务

        Returns:
            True 如果任务存在并已删除
        """
        cursor = await self._conn.execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        return cursor.rowcount > 0

    async def compare_and_set_escalation(
        self,
        task_id: str,
        expected_status: EscalationStatus,
        new_status: EscalationStatus,
        updated_at: str,
    ) -> bool:
        """条件更新升级状态：仅当当前值等于 expected_status 时写入

        Returns:
            True 如果写入成功；False 表示已被其他会话推进（或任务已删除）
        """
        cursor = await self._conn.execute(
            """
            UPDATE tasks
            SET escalation_status = ?, updated_at = ?
            WHERE task_id = ? AND escalation_status = ?
            """,
            (new_status.value, updated_at, task_id, expected_status.value),
        )
        return cursor.rowcount == 1

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型

        只填了一半的升级配置视为未配置。
        """
        return Task(
            task_id=row[0],
            created_at=datetime.fromisoformat(row[1]),
            updated_at=datetime.fromisoformat(row[2]),
            name=row[3],
            description=row[4],
            priority=row[5],
            status=row[6],
            due_date=date.fromisoformat(row[7]) if row[7] else None,
            assigned_to_id=row[8],
            assigned_to_name=row[9],
            completion_notes=row[10],
            escalation_status=row[11],
            escalation_level1=EscalationStage.from_fields(row[12], row[13]),
            escalation_level2=EscalationStage.from_fields(row[14], row[15]),
            escalation_email=EscalationStage.from_fields(row[16], row[17]),
        )
