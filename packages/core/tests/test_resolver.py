"""升级流转判定单元测试

测试内容：
1. 阈值越过后前进一级
2. 每次最多前进一级
3. 未配置级别、已完成、时钟异常时不变
"""

from datetime import UTC, date, datetime, timedelta

import pytest
from duedesk.core.escalation import resolve_transition
from duedesk.core.models import ESCALATION_ORDER, EscalationStatus, TaskStatus


class TestResolveTransition:
    """流转判定"""

    def test_not_overdue_no_change(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1), level1=("userA", 3))
        assert resolve_transition(task, date(2024, 1, 3)) is None

    def test_overdue_advances_to_level1(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1), level1=("userA", 3))
        assert resolve_transition(task, date(2024, 1, 5)) == EscalationStatus.LEVEL1

    def test_advances_one_stage_even_when_far_overdue(self, task_factory):
        """越过多个阈值也只前进一级"""
        task = task_factory(due_date=date(2024, 1, 1))
        assert resolve_transition(task, date(2025, 1, 1)) == EscalationStatus.LEVEL1
        task = task.model_copy(update={"escalation_status": EscalationStatus.LEVEL1})
        assert resolve_transition(task, date(2025, 1, 1)) == EscalationStatus.LEVEL2

    def test_level2_to_email_sent(self, task_factory):
        task = task_factory(
            due_date=date(2024, 1, 1),
            escalation_status=EscalationStatus.LEVEL2,
        )
        # 阈值 = 1/1 + 2 + 3 + 5 = 1/11
        assert resolve_transition(task, date(2024, 1, 11)) is None
        assert resolve_transition(task, date(2024, 1, 12)) == EscalationStatus.EMAIL_SENT

    def test_email_sent_is_terminal(self, task_factory):
        task = task_factory(escalation_status=EscalationStatus.EMAIL_SENT)
        assert resolve_transition(task, date(2030, 1, 1)) is None

    def test_level1_missing_never_escalates(self, task_factory):
        """未配置一级升级：即使逾期也不升级"""
        task = task_factory(due_date=date(2024, 1, 1), level1=None)
        assert resolve_transition(task, date(2030, 1, 1)) is None

    def test_chain_stops_at_missing_level2(self, task_factory):
        task = task_factory(
            level2=None,
            email=("boss@example.com", 1),
            escalation_status=EscalationStatus.LEVEL1,
        )
        for offset in (1, 30, 3650):
            now = date(2024, 1, 10) + timedelta(days=offset)
            assert resolve_transition(task, now) is None

    @pytest.mark.parametrize("stage", ESCALATION_ORDER)
    def test_done_halts_escalation(self, task_factory, stage):
        task = task_factory(
            due_date=date(2024, 1, 1),
            status=TaskStatus.DONE,
            escalation_status=stage,
        )
        assert resolve_transition(task, date(2030, 1, 1)) is None

    def test_clock_before_creation_no_change(self, task_factory):
        task = task_factory(
            due_date=date(2024, 1, 1),
            level1=("u1", 0),
            created_at=datetime(2024, 6, 1, tzinfo=UTC),
        )
        assert resolve_transition(task, date(2024, 5, 31)) is None
        assert resolve_transition(task, date(2024, 6, 1)) == EscalationStatus.LEVEL1

    def test_no_due_date_no_change(self, task_factory):
        task = task_factory(due_date=None)
        assert resolve_transition(task, date(2030, 1, 1)) is None
