"""
Helpdesk Storage Layer

PostgreSQL storage implementations for helpdesk entities.
"""
from .base import BaseStorage
from .user_storage import UserStorage
from .department_storage import DepartmentStorage
from .ticket_storage import TicketStorage
from .notification_storage import NotificationStorage

__all__ = [
    'BaseStorage',
    'UserStorage',
    'DepartmentStorage',
    'TicketStorage',
    'NotificationStorage',
]
