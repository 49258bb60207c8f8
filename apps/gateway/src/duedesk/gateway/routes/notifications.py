"""通知路由

GET /api/notifications?user_id=: 用户通知列表 + 未读数。
POST /api/notifications/{notification_id}/read: 标记单条已读。
POST /api/notifications/read-all?user_id=: 标记全部已读。
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from starlette.responses import JSONResponse

from ..deps import get_store_group
from ..services.notification_service import NotificationService

router = APIRouter()


class NotificationOut(BaseModel):
    """通知响应体"""

    notification_id: str
    user_id: str
    message: str
    type: str
    is_read: bool
    created_at: str
    link_to: str | None


class NotificationListResponse(BaseModel):
    """通知列表响应"""

    notifications: list[NotificationOut]
    unread_count: int


def notification_out(n) -> NotificationOut:
    return NotificationOut(
        notification_id=n.notification_id,
        user_id=n.user_id,
        message=n.message,
        type=n.type.value,
        is_read=n.is_read,
        created_at=n.created_at.isoformat(),
        link_to=n.link_to,
    )


@router.get("/api/notifications", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str = Query(description="接收者 ID 或邮箱"),
    store_group=Depends(get_store_group),
):
    """查询用户通知，按 created_at 倒序"""
    service = NotificationService(store_group)
    notifications, unread = await service.list_for_user(user_id)
    return NotificationListResponse(
        notifications=[notification_out(n) for n in notifications],
        unread_count=unread,
    )


@router.post("/api/notifications/read-all")
async def mark_all_read(
    user_id: str = Query(description="接收者 ID 或邮箱"),
    store_group=Depends(get_store_group),
):
    """标记用户全部通知已读"""
    service = NotificationService(store_group)
    count = await service.mark_all_read(user_id)
    return {"updated": count}


@router.post("/api/notifications/{notification_id}/read")
async def mark_read(
    notification_id: str,
    store_group=Depends(get_store_group),
):
    """标记单条通知已读"""
    service = NotificationService(store_group)
    notification = await service.mark_read(notification_id)
    if notification is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": {
                    "code": "NOTIFICATION_NOT_FOUND",
                    "message": f"Notification with id {notification_id} does not exist",
                }
            },
        )
    return notification_out(notification)
