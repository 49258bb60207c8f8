"""Task Domain Model

升级链每一级建模为可选的 EscalationStage（目标 + 天数成对出现），
"只填一半"的配置在结构上无法表达。
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from .enums import EscalationStatus, TaskPriority, TaskStatus


class EscalationStage(BaseModel):
    """单级升级配置：负责人（或邮箱）+ 距上一级的天数"""

    target: str = Field(min_length=1, description="升级对象：用户 ID 或邮箱地址")
    duration_days: int = Field(ge=0, description="距上一级基准日期的天数")

    @classmethod
    def from_fields(
        cls,
        target: str | None,
        duration_days: int | None,
    ) -> "EscalationStage | None":
        """从扁平字段构造；任一字段缺失或非法视为未配置"""
        if not target or duration_days is None or duration_days < 0:
            return None
        return cls(target=target, duration_days=duration_days)


def _check_email_stage(stage: EscalationStage | None) -> EscalationStage | None:
    if stage is not None and "@" not in stage.target:
        raise ValueError("escalation email target must be an email address")
    return stage


class Task(BaseModel):
    """Task 数据模型

    escalation_status 只由升级引擎推进，单调不减。
    """

    task_id: str = Field(description="唯一标识，ULID 格式")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    name: str = Field(description="任务名称")
    description: str = Field(default="", description="任务描述")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="工作状态")
    due_date: date | None = Field(default=None, description="截止日期，缺省则永不升级")
    assigned_to_id: str | None = Field(default=None, description="执行人 ID")
    assigned_to_name: str | None = Field(default=None, description="执行人名称")
    completion_notes: str | None = Field(default=None, description="完成备注")
    escalation_status: EscalationStatus = Field(
        default=EscalationStatus.NONE,
        description="当前升级状态",
    )
    escalation_level1: EscalationStage | None = Field(default=None, description="一级升级")
    escalation_level2: EscalationStage | None = Field(default=None, description="二级升级")
    escalation_email: EscalationStage | None = Field(default=None, description="最终邮件升级")


class TaskCreate(BaseModel):
    """创建任务的输入"""

    name: str = Field(min_length=1, description="任务名称")
    description: str = Field(default="")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
    due_date: date | None = Field(default=None)
    assigned_to_id: str | None = Field(default=None)
    assigned_to_name: str | None = Field(default=None)
    escalation_level1: EscalationStage | None = Field(default=None)
    escalation_level2: EscalationStage | None = Field(default=None)
    escalation_email: EscalationStage | None = Field(default=None)

    @field_validator("escalation_email")
    @classmethod
    def validate_email_stage(cls, v: EscalationStage | None) -> EscalationStage | None:
        return _check_email_stage(v)


class TaskUpdate(BaseModel):
    """编辑任务的输入（部分更新）

    不包含 escalation_status：升级状态只能由升级引擎推进。
    """

    name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None)
    priority: TaskPriority | None = Field(default=None)
    status: TaskStatus | None = Field(default=None)
    due_date: date | None = Field(default=None)
    assigned_to_id: str | None = Field(default=None)
    assigned_to_name: str | None = Field(default=None)
    completion_notes: str | None = Field(default=None)
    escalation_level1: EscalationStage | None = Field(default=None)
    escalation_level2: EscalationStage | None = Field(default=None)
    escalation_email: EscalationStage | None = Field(default=None)

    @field_validator("escalation_email")
    @classmethod
    def validate_email_stage(cls, v: EscalationStage | None) -> EscalationStage | None:
        return _check_email_stage(v)
