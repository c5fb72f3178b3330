"""
Navigation Routes

Sidebar model for the signed-in user.
"""
from fastapi import APIRouter, Depends, Query

from ..errors import ApiResponse
from ..navigation import build_sidebar
from ..services.engine_service import get_engine_service
from .auth import require_employee

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("")
@router.get("/")
async def get_navigation(
    current_user: dict = Depends(require_employee),
    path: str = Query("/", max_length=512),
):
    """Role-filtered sidebar with active entry and unread badge"""
    engine = get_engine_service()
    unread = await engine.notification_service.get_unread_count(current_user["user_id"])
    sidebar = build_sidebar(current_user, unread, path)
    return ApiResponse.success("Navigation retrieved successfully", sidebar)
