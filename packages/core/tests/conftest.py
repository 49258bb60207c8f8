"""packages/core 测试配置 -- 核心层 fixture 与任务构造工具"""

from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest
import pytest_asyncio
from duedesk.core.models import EscalationStage, EscalationStatus, Task, TaskStatus
from duedesk.core.store import StoreGroup, create_store_group
from ulid import ULID


def make_task(
    *,
    due_date: date | None = date(2024, 1, 10),
    status: TaskStatus = TaskStatus.TODO,
    escalation_status: EscalationStatus = EscalationStatus.NONE,
    level1: tuple[str, int] | None = ("u1", 2),
    level2: tuple[str, int] | None = ("u2", 3),
    email: tuple[str, int] | None = ("boss@example.com", 5),
    created_at: datetime = datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
    name: str = "Quarterly report",
    **kwargs,
) -> Task:
    """构造测试任务，三级升级默认全部配置（2/3/5 天）"""

    def stage(value: tuple[str, int] | None) -> EscalationStage | None:
        if value is None:
            return None
        return EscalationStage(target=value[0], duration_days=value[1])

    return Task(
        task_id=kwargs.pop("task_id", str(ULID())),
        created_at=created_at,
        updated_at=created_at,
        name=name,
        status=status,
        due_date=due_date,
        escalation_status=escalation_status,
        escalation_level1=stage(level1),
        escalation_level2=stage(level2),
        escalation_email=stage(email),
        **kwargs,
    )


@pytest.fixture
def task_factory():
    """任务构造工具"""
    return make_task


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def core_stores(core_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """核心层已初始化的 StoreGroup"""
    store_group = await create_store_group(str(core_db_path))
    yield store_group
    await store_group.conn.close()
