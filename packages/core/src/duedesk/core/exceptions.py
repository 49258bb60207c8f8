"""DueDesk Core 异常体系"""


class DueDeskError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重跑恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class TaskNotFoundError(DueDeskError):
    """任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist", recoverable=False)
        self.task_id = task_id


class EscalationConflictError(DueDeskError):
    """条件更新失败：存储中的升级状态已被其他会话推进

    调用方应静默丢弃本地增量，不发送通知。
    """

    def __init__(self, task_id: str, expected_status: str) -> None:
        super().__init__(
            f"Escalation status of task {task_id} is no longer {expected_status!r}",
            recoverable=True,
        )
        self.task_id = task_id
        self.expected_status = expected_status
