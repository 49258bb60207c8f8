"""升级执行路由

POST /api/escalations/run: 按需执行一次升级评估，返回逐任务结果。
- 200: 执行完成（包括部分任务写库或通知失败）
- 503: 加载任务失败，可整体重跑
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.responses import JSONResponse

from ..deps import get_escalation_config, get_store_group
from ..services.task_service import TaskService
from .tasks import TaskOut, task_out

log = structlog.get_logger()

router = APIRouter()


class EscalationRunResponse(BaseModel):
    """升级执行响应"""

    checked: int
    advanced: list[str]
    skipped: list[str]
    failed: list[str]
    notify_failed: list[str]
    updated_tasks: list[TaskOut]


@router.post("/api/escalations/run", response_model=EscalationRunResponse)
async def run_escalations(
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """执行一次升级评估；重复调用是安全的"""
    service = TaskService(store_group, config)
    try:
        report = await service.run_escalations()
    except Exception as e:
        log.error("escalation_run_failed", error_type=type(e).__name__)
        return JSONResponse(
            status_code=503,
            content={
                "error": {
                    "code": "ESCALATION_RUN_FAILED",
                    "message": "Failed to load tasks, please retry",
                }
            },
        )

    return EscalationRunResponse(
        checked=report.checked,
        advanced=report.advanced,
        skipped=report.skipped,
        failed=report.failed,
        notify_failed=report.notify_failed,
        updated_tasks=[task_out(t, service) for t in report.updated_tasks],
    )
