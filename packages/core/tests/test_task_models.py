"""Domain Model 单元测试

测试内容：
1. Task 默认值
2. EscalationStage 成对约束
3. 输入模型校验（邮箱、不可修改升级状态）
"""

from datetime import UTC, date, datetime

import pytest
from duedesk.core.models import (
    EscalationStage,
    EscalationStatus,
    Notification,
    NotificationType,
    Task,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from pydantic import ValidationError


class TestTaskModel:
    """Task 模型"""

    def test_defaults(self):
        """新任务为 To Do + 未升级"""
        now = datetime.now(UTC)
        task = Task(task_id="t1", created_at=now, updated_at=now, name="Audit")
        assert task.status == TaskStatus.TODO
        assert task.escalation_status == EscalationStatus.NONE
        assert task.priority == TaskPriority.MEDIUM
        assert task.due_date is None
        assert task.escalation_level1 is None

    def test_accepts_stored_labels(self):
        """持久化字符串可直接反序列化为枚举"""
        now = datetime.now(UTC)
        task = Task(
            task_id="t1",
            created_at=now,
            updated_at=now,
            name="Audit",
            status="In Progress",
            escalation_status="Level 2",
            priority="High",
        )
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.escalation_status == EscalationStatus.LEVEL2
        assert task.priority == TaskPriority.HIGH


class TestEscalationStage:
    """EscalationStage 成对约束"""

    def test_requires_target_and_duration(self):
        with pytest.raises(ValidationError):
            EscalationStage(target="u1")
        with pytest.raises(ValidationError):
            EscalationStage(duration_days=3)

    def test_rejects_negative_duration(self):
        with pytest.raises(ValidationError):
            EscalationStage(target="u1", duration_days=-1)

    def test_zero_days_is_valid(self):
        assert EscalationStage(target="u1", duration_days=0).duration_days == 0

    @pytest.mark.parametrize(
        "target,days",
        [(None, 3), ("", 3), ("u1", None), ("u1", -2)],
    )
    def test_from_fields_half_configured_is_none(self, target, days):
        """只填一半或非法的扁平字段视为未配置"""
        assert EscalationStage.from_fields(target, days) is None

    def test_from_fields_complete(self):
        stage = EscalationStage.from_fields("u1", 4)
        assert stage == EscalationStage(target="u1", duration_days=4)


class TestInputModels:
    """创建/编辑输入"""

    def test_create_rejects_non_email_final_stage(self):
        with pytest.raises(ValidationError):
            TaskCreate(
                name="Audit",
                escalation_email={"target": "not-an-email", "duration_days": 2},
            )

    def test_create_accepts_email_final_stage(self):
        data = TaskCreate(
            name="Audit",
            due_date=date(2024, 1, 1),
            escalation_email={"target": "boss@example.com", "duration_days": 2},
        )
        assert data.escalation_email.target == "boss@example.com"

    def test_create_rejects_half_configured_stage(self):
        with pytest.raises(ValidationError):
            TaskCreate(name="Audit", escalation_level1={"target": "u1"})

    def test_create_requires_name(self):
        with pytest.raises(ValidationError):
            TaskCreate(name="")

    def test_update_has_no_escalation_status(self):
        """编辑输入不包含升级状态字段"""
        assert "escalation_status" not in TaskUpdate.model_fields
        patch = TaskUpdate.model_validate({"escalation_status": "Email Sent"})
        assert patch.model_fields_set == set()


class TestNotificationModel:
    """Notification 模型"""

    def test_defaults_unread(self):
        n = Notification(
            notification_id="n1",
            user_id="u1",
            message="hi",
            type=NotificationType.TASK_ASSIGNED,
            created_at=datetime.now(UTC),
        )
        assert n.is_read is False
        assert n.dedupe_key is None
