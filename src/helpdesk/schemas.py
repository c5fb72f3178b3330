"""
Request Schemas

Pydantic models and query parameter sets validated before a route
handler runs. Failures surface as 400 "Validation error" responses.
"""
import math
from typing import List, Optional
from uuid import UUID

from fastapi import Query
from pydantic import BaseModel, Field, field_validator

from .models.notification import NotificationType
from .models.user import UserRole


# ============================================
# Departments
# ============================================

class CreateDepartmentRequest(BaseModel):
    """Create department request (admin only)"""
    name: str = Field(min_length=2, max_length=100)
    keywords: List[str] = Field(min_length=1)

    @field_validator("keywords")
    @classmethod
    def keywords_not_empty(cls, value: List[str]) -> List[str]:
        if any(len(keyword) < 1 for keyword in value):
            raise ValueError("Keyword cannot be empty")
        return value


class UpdateDepartmentRequest(BaseModel):
    """Update department request, all fields optional"""
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    keywords: Optional[List[str]] = Field(default=None, min_length=1)

    @field_validator("keywords")
    @classmethod
    def keywords_not_empty(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and any(len(keyword) < 1 for keyword in value):
            raise ValueError("Keyword cannot be empty")
        return value


# ============================================
# Notifications
# ============================================

class SendTestNotificationRequest(BaseModel):
    """Send a test notification to one user or to every user with a role"""
    target_user_id: Optional[UUID] = None
    target_role: Optional[UserRole] = None
    department_id: Optional[UUID] = None
    message: str = Field(default="Test notification", min_length=1, max_length=500)
    type: NotificationType = NotificationType.SYSTEM_NOTIFICATION


# ============================================
# Query parameters
# ============================================

# Keeps (page - 1) * limit well inside a bigint offset
MAX_PAGE = 1_000_000


class PaginationParams:
    """page/limit query parameters"""

    default_limit = 10

    def __init__(
        self,
        page: int = Query(1, ge=1, le=MAX_PAGE),
        limit: Optional[int] = Query(None, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit if limit is not None else self.default_limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class NotificationFilters(PaginationParams):
    """Pagination plus notification filters"""

    default_limit = 20

    def __init__(
        self,
        page: int = Query(1, ge=1, le=MAX_PAGE),
        limit: Optional[int] = Query(None, ge=1, le=100),
        type: Optional[NotificationType] = Query(None),
        read: Optional[bool] = Query(None),
        ticket_id: Optional[UUID] = Query(None),
    ):
        super().__init__(page, limit)
        self.type = type
        self.read = read
        self.ticket_id = ticket_id


def pagination_meta(page: int, limit: int, total_count: int) -> dict:
    """Pagination block returned with every paged listing"""
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_count": total_count,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }
