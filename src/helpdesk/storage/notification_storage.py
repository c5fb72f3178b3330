"""
Notification Storage

PostgreSQL storage for in-app notifications.
"""
import json
import logging
from datetime import datetime
from typing import Optional, List, Dict, Tuple
from uuid import UUID

from .base import BaseStorage
from ..models.notification import Notification, NotificationType

logger = logging.getLogger("helpdesk.storage.notification")

_NOTIFICATION_COLUMNS = """
    id, message, type::text AS type, read, read_at, target_user_id,
    ticket_id, metadata, created_at
"""

_INSERT_NOTIFICATION = f"""
    INSERT INTO notifications (
        id, message, type, read, read_at, target_user_id,
        ticket_id, metadata, created_at
    )
    VALUES ($1, $2, $3::notification_type, $4, $5, $6, $7, $8, $9)
    RETURNING {_NOTIFICATION_COLUMNS}
"""


class NotificationStorage(BaseStorage):
    """Storage for Notification entities"""

    async def create(self, notification: Notification) -> Notification:
        """Create a new notification"""
        row = await self.fetchrow(_INSERT_NOTIFICATION, *self._insert_args(notification))
        return self._row_to_notification(row)

    async def create_many(self, notifications: List[Notification]) -> List[Notification]:
        """Insert several notifications in one transaction, all or none"""
        created = []
        async with self._pool().acquire() as conn:
            async with conn.transaction():
                for notification in notifications:
                    row = await conn.fetchrow(_INSERT_NOTIFICATION, *self._insert_args(notification))
                    created.append(self._row_to_notification(row))
        return created

    async def get_for_user(self, notification_id: UUID, user_id: UUID) -> Optional[Notification]:
        """Get a notification only if it belongs to the user"""
        query = f"""
            SELECT {_NOTIFICATION_COLUMNS} FROM notifications
            WHERE id = $1 AND target_user_id = $2
        """
        row = await self.fetchrow(query, notification_id, user_id)
        return self._row_to_notification(row) if row else None

    async def list_by_user(
        self,
        user_id: UUID,
        offset: int = 0,
        limit: int = 20,
        type: Optional[NotificationType] = None,
        read: Optional[bool] = None,
        ticket_id: Optional[UUID] = None,
    ) -> List[Notification]:
        """List a user's notifications, newest first"""
        where, args = self._filters(user_id, type, read, ticket_id)
        n = len(args)
        query = f"""
            SELECT {_NOTIFICATION_COLUMNS} FROM notifications
            WHERE {where}
            ORDER BY created_at DESC
            OFFSET ${n + 1} LIMIT ${n + 2}
        """
        rows = await self.fetch(query, *args, offset, limit)
        return [self._row_to_notification(row) for row in rows]

    async def count_by_user(
        self,
        user_id: UUID,
        type: Optional[NotificationType] = None,
        read: Optional[bool] = None,
        ticket_id: Optional[UUID] = None,
    ) -> int:
        """Count a user's notifications matching the filters"""
        where, args = self._filters(user_id, type, read, ticket_id)
        return await self.fetchval(f"SELECT COUNT(*) FROM notifications WHERE {where}", *args)

    async def count_by_type(self, user_id: UUID) -> Dict[str, int]:
        """Notification counts per type for a user"""
        query = """
            SELECT type::text AS type, COUNT(*) AS n
            FROM notifications WHERE target_user_id = $1
            GROUP BY type
        """
        rows = await self.fetch(query, user_id)
        return {row["type"]: row["n"] for row in rows}

    async def mark_read(self, notification_id: UUID, read_at: datetime) -> Optional[Notification]:
        """Mark one notification read"""
        query = f"""
            UPDATE notifications SET read = true, read_at = $2
            WHERE id = $1
            RETURNING {_NOTIFICATION_COLUMNS}
        """
        row = await self.fetchrow(query, notification_id, read_at)
        return self._row_to_notification(row) if row else None

    async def mark_all_read(self, user_id: UUID, read_at: datetime) -> int:
        """Mark every unread notification of a user read, returns rows changed"""
        query = """
            UPDATE notifications SET read = true, read_at = $2
            WHERE target_user_id = $1 AND read = false
        """
        result = await self.execute(query, user_id, read_at)
        return self._affected(result)

    async def delete(self, notification_id: UUID) -> bool:
        """Delete notification"""
        result = await self.execute("DELETE FROM notifications WHERE id = $1", notification_id)
        return self._affected(result) == 1

    @staticmethod
    def _insert_args(notification: Notification) -> tuple:
        return (
            notification.id, notification.message, notification.type.value,
            notification.read, notification.read_at, notification.target_user_id,
            notification.ticket_id, json.dumps(notification.metadata),
            notification.created_at,
        )

    def _filters(
        self,
        user_id: UUID,
        type: Optional[NotificationType],
        read: Optional[bool],
        ticket_id: Optional[UUID],
    ) -> Tuple[str, list]:
        """Build the WHERE clause and its arguments"""
        clauses = ["target_user_id = $1"]
        args: list = [user_id]
        if type is not None:
            args.append(type.value)
            clauses.append(f"type = ${len(args)}::notification_type")
        if read is not None:
            args.append(read)
            clauses.append(f"read = ${len(args)}")
        if ticket_id is not None:
            args.append(ticket_id)
            clauses.append(f"ticket_id = ${len(args)}")
        return " AND ".join(clauses), args

    def _row_to_notification(self, row) -> Notification:
        """Convert database row to Notification"""
        metadata = row["metadata"] if row["metadata"] else {}
        if isinstance(metadata, str):
            metadata = json.loads(metadata)
        return Notification(
            id=row["id"],
            message=row["message"],
            type=NotificationType(row["type"]),
            read=row["read"],
            read_at=row["read_at"],
            target_user_id=row["target_user_id"],
            ticket_id=row["ticket_id"],
            metadata=metadata,
            created_at=row["created_at"],
        )
