"""
Notification Routes

Owner-scoped notification inbox plus an admin-only test sender.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends

from ..errors import ApiResponse
from ..schemas import NotificationFilters, SendTestNotificationRequest
from ..services.engine_service import get_engine_service
from .auth import require_admin, require_employee

logger = logging.getLogger("helpdesk.routes.notifications")
router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
@router.get("/")
async def list_notifications(
    current_user: dict = Depends(require_employee),
    filters: NotificationFilters = Depends(),
):
    """Current user's notifications with pagination and filters"""
    engine = get_engine_service()
    result = await engine.notification_service.get_user_notifications(
        current_user["user_id"],
        page=filters.page,
        limit=filters.limit,
        type=filters.type,
        read=filters.read,
        ticket_id=filters.ticket_id,
    )
    return ApiResponse.success("Notifications retrieved successfully", result)


@router.get("/stats")
async def get_notification_stats(current_user: dict = Depends(require_employee)):
    """Notification statistics for current user"""
    engine = get_engine_service()
    stats = await engine.notification_service.get_notification_stats(current_user["user_id"])
    return ApiResponse.success("Notification statistics retrieved successfully", stats)


@router.patch("/read-all")
async def mark_all_notifications_read(current_user: dict = Depends(require_employee)):
    """Mark all notifications as read for current user"""
    engine = get_engine_service()
    count = await engine.notification_service.mark_all_as_read(current_user["user_id"])
    return ApiResponse.success(f"{count} notifications marked as read", {"count": count})


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: UUID,
    current_user: dict = Depends(require_employee),
):
    """Mark a notification as read"""
    engine = get_engine_service()
    notification = await engine.notification_service.mark_as_read(
        notification_id, current_user["user_id"]
    )
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return ApiResponse.success("Notification marked as read", notification.to_dict())


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: UUID,
    current_user: dict = Depends(require_employee),
):
    """Delete a notification"""
    engine = get_engine_service()
    deleted = await engine.notification_service.delete_notification(
        notification_id, current_user["user_id"]
    )
    if not deleted:
        raise HTTPException(status_code=404, detail="Notification not found")
    return ApiResponse.success("Notification deleted successfully")


@router.post("/test", status_code=201)
async def send_test_notification(
    request: SendTestNotificationRequest,
    current_user: dict = Depends(require_admin),
):
    """
    Send a test notification (admin only).

    Targets one user by id, or every user with target_role
    (optionally limited to department_id).
    """
    engine = get_engine_service()
    service = engine.notification_service

    if request.target_user_id:
        notification = await service.create_notification(
            target_user_id=request.target_user_id,
            message=request.message,
            type=request.type,
        )
        if not notification:
            raise HTTPException(status_code=404, detail="Target user not found")
        data = notification.to_dict()
    elif request.target_role:
        notifications = await service.create_bulk_notifications(
            target_role=request.target_role,
            message=request.message,
            type=request.type,
            department_id=request.department_id,
        )
        data = [n.to_dict() for n in notifications]
    else:
        raise HTTPException(status_code=400, detail="Target user or role must be specified")

    logger.info(f"Test notification sent by admin {current_user['user_id']}")
    return ApiResponse.success("Test notification sent successfully", data)
