"""DueDesk 升级引擎 -- 截止日期计算、流转判定、Runner

三者均为纯函数，时钟通过参数注入。
"""

from .deadline import (
    as_day,
    compute_effective_deadline,
    escalation_stages,
    escalation_threshold,
    stage_for,
)
from .resolver import resolve_transition
from .runner import (
    build_escalation_message,
    build_transition,
    escalation_dedupe_key,
    run_escalations,
)

__all__ = [
    "as_day",
    "compute_effective_deadline",
    "escalation_stages",
    "escalation_threshold",
    "stage_for",
    "resolve_transition",
    "run_escalations",
    "build_transition",
    "build_escalation_message",
    "escalation_dedupe_key",
]
