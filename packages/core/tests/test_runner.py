"""升级 Runner 单元测试

测试内容：
1. 产出的任务副本、条件更新请求、通知请求
2. 单调性与幂等性
3. 逐日执行的完整升级序列
"""

from datetime import date, timedelta

from duedesk.core.escalation import (
    build_escalation_message,
    escalation_dedupe_key,
    run_escalations,
)
from duedesk.core.models import (
    ESCALATION_ORDER,
    EscalationStatus,
    NotificationType,
    escalation_rank,
)


class TestRunEscalations:
    """单次执行"""

    def test_single_stage_example(self, task_factory):
        """一级 3 天：1/3 不变，1/5 升级并通知 userA"""
        task = task_factory(
            due_date=date(2024, 1, 1),
            level1=("userA", 3),
            level2=None,
            email=None,
        )
        assert run_escalations([task], date(2024, 1, 3)).transitions == []

        result = run_escalations([task], date(2024, 1, 5))
        assert len(result.transitions) == 1
        assert result.updates[0].expected_status == EscalationStatus.NONE
        assert result.updates[0].new_status == EscalationStatus.LEVEL1
        assert result.updated_tasks[0].escalation_status == EscalationStatus.LEVEL1
        assert len(result.notifications) == 1
        notification = result.notifications[0]
        assert notification.user_id == "userA"
        assert notification.type == NotificationType.TASK_ESCALATED
        assert notification.link_to == "/tasks"
        assert task.name in notification.message

    def test_updated_task_changes_only_escalation_status(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1))
        updated = run_escalations([task], date(2024, 2, 1)).updated_tasks[0]
        assert updated.model_dump(exclude={"escalation_status"}) == task.model_dump(
            exclude={"escalation_status"}
        )
        # 输入不被修改
        assert task.escalation_status == EscalationStatus.NONE

    def test_email_stage_notifies_email_address(self, task_factory):
        task = task_factory(
            due_date=date(2024, 1, 1),
            escalation_status=EscalationStatus.LEVEL2,
        )
        result = run_escalations([task], date(2024, 3, 1), link_to="/app/tasks")
        notification = result.notifications[0]
        assert notification.user_id == "boss@example.com"
        assert notification.link_to == "/app/tasks"
        assert notification.dedupe_key == escalation_dedupe_key(
            task.task_id, EscalationStatus.EMAIL_SENT
        )
        assert notification.message.startswith("Final escalation")

    def test_only_due_tasks_in_result(self, task_factory):
        due = task_factory(due_date=date(2024, 1, 1))
        not_due = task_factory(due_date=date(2024, 12, 1))
        result = run_escalations([due, not_due], date(2024, 1, 10))
        assert [t.task_id for t in result.updated_tasks] == [due.task_id]

    def test_message_truncates_long_name(self, task_factory):
        task = task_factory(name="x" * 500)
        message = build_escalation_message(task, EscalationStatus.LEVEL1)
        assert "x" * 120 in message
        assert "x" * 121 not in message


class TestRunProperties:
    """单调性、幂等性、升级链门控"""

    def test_idempotent_after_applying_result(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1))
        now = date(2024, 1, 4)
        first = run_escalations([task], now)
        assert len(first.transitions) == 1
        second = run_escalations(first.updated_tasks, now)
        assert second.transitions == []

    def test_monotonic_one_stage_per_call(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1))
        now = date(2024, 1, 1)
        for _ in range(40):
            result = run_escalations([task], now)
            if result.transitions:
                new = result.updated_tasks[0]
                assert (
                    escalation_rank(new.escalation_status)
                    == escalation_rank(task.escalation_status) + 1
                )
                task = new
            now += timedelta(days=1)
        assert task.escalation_status == EscalationStatus.EMAIL_SENT

    def test_gating_without_level2(self, task_factory):
        task = task_factory(due_date=date(2024, 1, 1), level2=None)
        now = date(2024, 1, 1)
        for _ in range(365):
            result = run_escalations([task], now)
            task = result.updated_tasks[0] if result.transitions else task
            now += timedelta(days=1)
        assert task.escalation_status == EscalationStatus.LEVEL1

    def test_daily_sequence_three_notifications(self, task_factory):
        """3/2/2 天：1/5、1/7、1/9 各升级一次，全程恰好三条通知"""
        task = task_factory(
            due_date=date(2024, 1, 1),
            level1=("u1", 3),
            level2=("u2", 2),
            email=("boss@example.com", 2),
        )
        notifications = []
        transition_days = []
        for offset in range(30):
            now = date(2024, 1, 1) + timedelta(days=offset)
            result = run_escalations([task], now)
            if result.transitions:
                task = result.updated_tasks[0]
                notifications.extend(result.notifications)
                transition_days.append(now)

        assert transition_days == [date(2024, 1, 5), date(2024, 1, 7), date(2024, 1, 9)]
        assert [n.user_id for n in notifications] == ["u1", "u2", "boss@example.com"]
        assert len({n.dedupe_key for n in notifications}) == 3
        assert task.escalation_status == ESCALATION_ORDER[-1]
