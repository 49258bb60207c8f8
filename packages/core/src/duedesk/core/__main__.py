"""CLI 入口模块 -- python -m duedesk.core <command>

支持的命令：
  run-escalations  执行一次升级评估并落盘
  next-due         列出未完成任务的生效截止日期
"""

import asyncio
import sys
from datetime import UTC, datetime

from .config import get_db_path, load_escalation_config


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m duedesk.core <command>")
        print("命令:")
        print("  run-escalations  执行一次升级评估并落盘")
        print("  next-due         列出未完成任务的生效截止日期")
        sys.exit(1)

    command = sys.argv[1]

    if command == "run-escalations":
        asyncio.run(run_escalations_command())
    elif command == "next-due":
        asyncio.run(next_due_command())
    else:
        print(f"未知命令: {command}")
        print("可用命令: run-escalations, next-due")
        sys.exit(1)


async def run_escalations_command() -> None:
    """执行一次升级评估"""
    from .escalation.apply import apply_escalations
    from .store import create_store_group

    db_path = get_db_path()
    config = load_escalation_config()

    print(f"数据库路径: {db_path}")
    print(f"时区: {config.timezone}")
    print("开始执行升级评估...")

    store_group = await create_store_group(db_path)

    try:
        report = await apply_escalations(store_group, datetime.now(UTC), config)
        print(
            f"评估完成，检查 {report.checked} 个任务，"
            f"推进 {len(report.advanced)}，跳过 {len(report.skipped)}，"
            f"失败 {len(report.failed)}，通知失败 {len(report.notify_failed)}"
        )
        for task in report.updated_tasks:
            print(f"  {task.task_id}  {task.name}  -> {task.escalation_status.value}")
    finally:
        await store_group.conn.close()


async def next_due_command() -> None:
    """列出未完成任务的生效截止日期"""
    from .escalation import compute_effective_deadline
    from .models import TaskStatus
    from .store import create_store_group

    config = load_escalation_config()
    store_group = await create_store_group(get_db_path())
    now = datetime.now(UTC)

    try:
        tasks = await store_group.task_store.list_tasks()
        for task in tasks:
            if task.status == TaskStatus.DONE:
                continue
            info = compute_effective_deadline(task, now, config.tzinfo)
            deadline = info.deadline.isoformat() if info.deadline else "-"
            flag = "逾期" if info.is_overdue else ""
            print(
                f"{task.task_id}  {deadline:<10}  "
                f"{task.escalation_status.value:<10}  {flag}  {task.name}"
            )
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
