"""任务路由

GET /api/tasks: 任务列表，支持 status 筛选，附带生效截止日期。
GET /api/tasks/{task_id}: 任务详情。
POST /api/tasks: 创建任务（201）。
PATCH /api/tasks/{task_id}: 部分更新（不可修改升级状态）。
POST /api/tasks/{task_id}/complete: 标记完成。
DELETE /api/tasks/{task_id}: 删除任务（204）。
"""

from datetime import date

from duedesk.core.exceptions import TaskNotFoundError
from duedesk.core.models import EscalationStage, Task, TaskCreate, TaskUpdate
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from starlette.responses import JSONResponse, Response

from ..deps import get_escalation_config, get_store_group
from ..services.task_service import TaskService

router = APIRouter()


class TaskOut(BaseModel):
    """任务响应体"""

    task_id: str
    created_at: str
    updated_at: str
    name: str
    description: str
    priority: str
    status: str
    due_date: date | None
    assigned_to_id: str | None
    assigned_to_name: str | None
    completion_notes: str | None
    escalation_status: str
    escalation_level1: EscalationStage | None
    escalation_level2: EscalationStage | None
    escalation_email: EscalationStage | None
    next_due_date: date | None
    is_overdue: bool


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[TaskOut]


class CompleteTaskRequest(BaseModel):
    """完成任务请求"""

    completion_notes: str | None = None


def task_out(task: Task, service: TaskService) -> TaskOut:
    """Task -> 响应体，附带生效截止日期"""
    info = service.next_due(task)
    return TaskOut(
        task_id=task.task_id,
        created_at=task.created_at.isoformat(),
        updated_at=task.updated_at.isoformat(),
        name=task.name,
        description=task.description,
        priority=task.priority.value,
        status=task.status.value,
        due_date=task.due_date,
        assigned_to_id=task.assigned_to_id,
        assigned_to_name=task.assigned_to_name,
        completion_notes=task.completion_notes,
        escalation_status=task.escalation_status.value,
        escalation_level1=task.escalation_level1,
        escalation_level2=task.escalation_level2,
        escalation_email=task.escalation_email,
        next_due_date=info.deadline,
        is_overdue=info.is_overdue,
    )


def task_not_found(task_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": {
                "code": "TASK_NOT_FOUND",
                "message": f"Task with id {task_id} does not exist",
            }
        },
    )


@router.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(
    status: str | None = Query(default=None, description="按状态筛选"),
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """查询任务列表，支持按状态筛选，按 created_at 倒序"""
    service = TaskService(store_group, config)
    tasks = await service.fetch_tasks(status)
    return TaskListResponse(tasks=[task_out(t, service) for t in tasks])


@router.post("/api/tasks", status_code=201, response_model=TaskOut)
async def create_task(
    data: TaskCreate,
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """创建任务"""
    service = TaskService(store_group, config)
    task = await service.create_task(data)
    return task_out(task, service)


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: str,
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """查询任务详情"""
    service = TaskService(store_group, config)
    task = await service.get_task(task_id)
    if task is None:
        return task_not_found(task_id)
    return task_out(task, service)


@router.patch("/api/tasks/{task_id}")
async def update_task(
    task_id: str,
    patch: TaskUpdate,
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """部分更新任务"""
    service = TaskService(store_group, config)
    try:
        task = await service.update_task(task_id, patch)
    except TaskNotFoundError:
        return task_not_found(task_id)
    return task_out(task, service)


@router.post("/api/tasks/{task_id}/complete")
async def complete_task(
    task_id: str,
    body: CompleteTaskRequest,
    store_group=Depends(get_store_group),
    config=Depends(get_escalation_config),
):
    """标记任务完成"""
    service = TaskService(store_group, config)
    try:
        task = await service.complete_task(task_id, body.completion_notes)
    except TaskNotFoundError:
        return task_not_found(task_id)
    return task_out(task, service)


@router.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """删除任务"""
    service = TaskService(store_group)
    try:
        await service.delete_task(task_id)
    except TaskNotFoundError:
        return task_not_found(task_id)
    return Response(status_code=204)
