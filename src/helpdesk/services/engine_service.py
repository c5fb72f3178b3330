"""
Engine Service

Main composite service that manages all storages and services.
Singleton pattern - one instance per process.
"""
import logging
from typing import Optional

from ..config import Config
from ..storage.user_storage import UserStorage
from ..storage.department_storage import DepartmentStorage
from ..storage.ticket_storage import TicketStorage
from ..storage.notification_storage import NotificationStorage
from .users_service import UsersService
from .department_service import DepartmentService
from .notification_service import NotificationService

logger = logging.getLogger("helpdesk.services.engine")

# Singleton instance
_engine_service: Optional["EngineService"] = None


class EngineService:
    """
    Composite engine service.

    Manages:
    - All storage connections (PostgreSQL)
    - Business logic services
    - Graceful shutdown
    """

    def __init__(
        self,
        user_storage: Optional[UserStorage] = None,
        department_storage: Optional[DepartmentStorage] = None,
        ticket_storage: Optional[TicketStorage] = None,
        notification_storage: Optional[NotificationStorage] = None,
    ):
        """Initialize engine service with all storages (PostgreSQL unless given)"""
        self.postgres_dsn = Config.get_postgres_dsn()

        self.user_storage = user_storage or UserStorage(self.postgres_dsn)
        self.department_storage = department_storage or DepartmentStorage(self.postgres_dsn)
        self.ticket_storage = ticket_storage or TicketStorage(self.postgres_dsn)
        self.notification_storage = notification_storage or NotificationStorage(self.postgres_dsn)

        # Initialize services (after storages)
        self.users_service = UsersService(self.user_storage)
        self.department_service = DepartmentService(
            self.department_storage,
            self.user_storage,
            self.ticket_storage,
        )
        self.notification_service = NotificationService(
            self.notification_storage,
            self.user_storage,
        )

        self._initialized = False
        logger.info("EngineService created")

    @property
    def _storages(self) -> list:
        return [
            self.user_storage,
            self.department_storage,
            self.ticket_storage,
            self.notification_storage,
        ]

    async def initialize(self):
        """Initialize all storages"""
        if self._initialized:
            logger.info("EngineService already initialized")
            return

        logger.info("Initializing EngineService...")

        for storage in self._storages:
            await storage.init()

        self._initialized = True
        logger.info("EngineService initialized successfully")

    async def close(self):
        """Close all connections"""
        logger.info("Closing EngineService...")

        for storage in self._storages:
            await storage.close()

        self._initialized = False
        logger.info("EngineService closed")

    @property
    def is_initialized(self) -> bool:
        """Check if service is initialized"""
        return self._initialized


def get_engine_service() -> EngineService:
    """Get or create engine service singleton"""
    global _engine_service
    if _engine_service is None:
        _engine_service = EngineService()
    return _engine_service


def set_engine_service(service: Optional[EngineService]) -> None:
    """Replace the singleton (None resets it)"""
    global _engine_service
    _engine_service = service


async def init_engine_service() -> EngineService:
    """Initialize and return engine service"""
    service = get_engine_service()
    await service.initialize()
    return service
