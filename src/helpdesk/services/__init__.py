"""
Helpdesk Services

Business logic services for the helpdesk API.
"""
from .engine_service import EngineService
from .users_service import UsersService
from .department_service import DepartmentService
from .notification_service import NotificationService

__all__ = [
    'EngineService',
    'UsersService',
    'DepartmentService',
    'NotificationService',
]
