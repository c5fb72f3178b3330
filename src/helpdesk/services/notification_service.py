"""
Notification Service

Creates in-app notifications and manages their read state.
Every query is scoped to the owning user.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from ..models.notification import Notification, NotificationType
from ..models.user import UserRole
from ..schemas import pagination_meta
from ..storage.notification_storage import NotificationStorage
from ..storage.user_storage import UserStorage

logger = logging.getLogger("helpdesk.services.notification")


class NotificationService:
    """
    Notification orchestrator.

    - create_notification: one recipient, must exist
    - create_bulk_notifications: every user with a role (optionally in a department)
    - read side: paged listing, stats, unread count
    - mutations: mark one/all read, delete
    """

    def __init__(
        self,
        notification_storage: NotificationStorage,
        user_storage: UserStorage,
    ):
        self.storage = notification_storage
        self.user_storage = user_storage

    async def create_notification(
        self,
        target_user_id: UUID,
        message: str,
        type: NotificationType = NotificationType.SYSTEM_NOTIFICATION,
        ticket_id: Optional[UUID] = None,
        metadata: Optional[dict] = None,
    ) -> Optional[Notification]:
        """
        Create a notification for a single user.

        Returns None if the target user does not exist.
        """
        user = await self.user_storage.get_by_id(target_user_id)
        if not user:
            logger.warning(f"Notification target not found: {target_user_id}")
            return None

        notification = await self.storage.create(Notification(
            message=message,
            type=type,
            target_user_id=target_user_id,
            ticket_id=ticket_id,
            metadata=metadata or {},
        ))
        logger.info(f"Notification {notification.type.value} created for user {target_user_id}")
        return notification

    async def create_bulk_notifications(
        self,
        target_role: UserRole,
        message: str,
        type: NotificationType = NotificationType.SYSTEM_NOTIFICATION,
        department_id: Optional[UUID] = None,
        ticket_id: Optional[UUID] = None,
        metadata: Optional[dict] = None,
    ) -> List[Notification]:
        """Create the same notification for every user with a role"""
        user_ids = await self.user_storage.list_ids_by_role(target_role, department_id)
        if not user_ids:
            logger.info(f"No target users for bulk notification (role={target_role.value})")
            return []

        # Delivered to every recipient or to none
        created = await self.storage.create_many([
            Notification(
                message=message,
                type=type,
                target_user_id=user_id,
                ticket_id=ticket_id,
                metadata=dict(metadata or {}),
            )
            for user_id in user_ids
        ])

        logger.info(f"Bulk notifications created for {len(created)} users")
        return created

    async def get_user_notifications(
        self,
        user_id: UUID,
        page: int = 1,
        limit: int = 20,
        type: Optional[NotificationType] = None,
        read: Optional[bool] = None,
        ticket_id: Optional[UUID] = None,
    ) -> dict:
        """One page of a user's notifications with pagination and unread count"""
        offset = (page - 1) * limit
        notifications = await self.storage.list_by_user(
            user_id, offset, limit, type=type, read=read, ticket_id=ticket_id
        )
        total = await self.storage.count_by_user(
            user_id, type=type, read=read, ticket_id=ticket_id
        )
        unread = await self.get_unread_count(user_id)

        return {
            "notifications": [n.to_dict() for n in notifications],
            "pagination": pagination_meta(page, limit, total),
            "unread_count": unread,
        }

    async def get_unread_count(self, user_id: UUID) -> int:
        return await self.storage.count_by_user(user_id, read=False)

    async def mark_as_read(self, notification_id: UUID, user_id: UUID) -> Optional[Notification]:
        """
        Mark a user's notification read.

        Returns None if the notification does not exist or belongs to
        someone else. Already read notifications are returned unchanged.
        """
        notification = await self.storage.get_for_user(notification_id, user_id)
        if not notification:
            return None
        if notification.read:
            return notification

        updated = await self.storage.mark_read(notification_id, datetime.utcnow())
        logger.info(f"Notification {notification_id} marked read by {user_id}")
        return updated

    async def mark_all_as_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user read"""
        count = await self.storage.mark_all_read(user_id, datetime.utcnow())
        logger.info(f"{count} notifications marked read for user {user_id}")
        return count

    async def delete_notification(self, notification_id: UUID, user_id: UUID) -> bool:
        """Delete a user's notification, False if not found or not owned"""
        notification = await self.storage.get_for_user(notification_id, user_id)
        if not notification:
            return False

        result = await self.storage.delete(notification_id)
        if result:
            logger.info(f"Notification {notification_id} deleted by {user_id}")
        return result

    async def get_notification_stats(self, user_id: UUID) -> dict:
        """Totals and per-type breakdown for a user"""
        total = await self.storage.count_by_user(user_id)
        unread = await self.get_unread_count(user_id)
        breakdown = await self.storage.count_by_type(user_id)

        return {
            "total_count": total,
            "unread_count": unread,
            "read_count": total - unread,
            "type_breakdown": breakdown,
        }
