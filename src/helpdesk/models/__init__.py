"""
Helpdesk Data Models

Domain models for the helpdesk API.
"""
from .user import User, UserRole
from .department import Department
from .ticket import Ticket, TicketStatus, TicketPriority
from .notification import Notification, NotificationType

__all__ = [
    'User',
    'UserRole',
    'Department',
    'Ticket',
    'TicketStatus',
    'TicketPriority',
    'Notification',
    'NotificationType',
]
