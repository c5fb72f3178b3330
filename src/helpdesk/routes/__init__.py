"""
Helpdesk API Routes

FastAPI route handlers for the helpdesk API.
"""
from .health import router as health_router
from .departments import router as departments_router
from .notifications import router as notifications_router
from .navigation import router as navigation_router

__all__ = [
    'health_router',
    'departments_router',
    'notifications_router',
    'navigation_router',
]
