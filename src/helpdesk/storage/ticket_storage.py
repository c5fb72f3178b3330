"""
Ticket Storage

Read-side PostgreSQL queries over tickets, used for department
listings and statistics.
"""
import logging
from datetime import datetime
from typing import Dict, List
from uuid import UUID

from .base import BaseStorage
from ..models.ticket import Ticket, TicketStatus, TicketPriority
from ..models.user import User

logger = logging.getLogger("helpdesk.storage.ticket")


class TicketStorage(BaseStorage):
    """Storage for Ticket entities"""

    async def list_by_department(
        self, department_id: UUID, offset: int = 0, limit: int = 10
    ) -> List[Ticket]:
        """Tickets of a department, newest first, with creator/assignee and response count"""
        query = """
            SELECT t.id, t.title, t.description, t.status::text AS status,
                   t.priority::text AS priority, t.tags, t.department_id,
                   t.created_by_id, t.assigned_to_id, t.created_at, t.updated_at,
                   c.name AS created_by_name, c.email AS created_by_email,
                   c.avatar_url AS created_by_avatar_url,
                   a.name AS assigned_to_name, a.email AS assigned_to_email,
                   a.avatar_url AS assigned_to_avatar_url,
                   (SELECT COUNT(*) FROM ticket_responses r WHERE r.ticket_id = t.id) AS response_count
            FROM tickets t
            JOIN users c ON c.id = t.created_by_id
            LEFT JOIN users a ON a.id = t.assigned_to_id
            WHERE t.department_id = $1
            ORDER BY t.created_at DESC
            OFFSET $2 LIMIT $3
        """
        rows = await self.fetch(query, department_id, offset, limit)
        return [self._row_to_ticket(row) for row in rows]

    async def count_by_department(self, department_id: UUID) -> int:
        """Total tickets in a department"""
        return await self.fetchval(
            "SELECT COUNT(*) FROM tickets WHERE department_id = $1", department_id
        )

    async def count_by_status(self, department_id: UUID) -> Dict[TicketStatus, int]:
        """Ticket counts per status (statuses with no tickets are absent)"""
        query = """
            SELECT status::text AS status, COUNT(*) AS n
            FROM tickets WHERE department_id = $1
            GROUP BY status
        """
        rows = await self.fetch(query, department_id)
        return {TicketStatus(row["status"]): row["n"] for row in rows}

    async def count_by_priority(self, department_id: UUID) -> Dict[TicketPriority, int]:
        """Ticket counts per priority (priorities with no tickets are absent)"""
        query = """
            SELECT priority::text AS priority, COUNT(*) AS n
            FROM tickets WHERE department_id = $1
            GROUP BY priority
        """
        rows = await self.fetch(query, department_id)
        return {TicketPriority(row["priority"]): row["n"] for row in rows}

    async def count_created_since(self, department_id: UUID, since: datetime) -> int:
        """Tickets created at or after a moment"""
        query = """
            SELECT COUNT(*) FROM tickets
            WHERE department_id = $1 AND created_at >= $2
        """
        return await self.fetchval(query, department_id, since)

    @staticmethod
    def _brief_user(row, prefix: str) -> dict:
        """Joined creator or assignee columns in the User brief shape"""
        return User(
            id=row[f"{prefix}_id"],
            name=row[f"{prefix}_name"],
            email=row[f"{prefix}_email"],
            avatar_url=row[f"{prefix}_avatar_url"],
        ).to_brief()

    def _row_to_ticket(self, row) -> Ticket:
        """Convert database row to Ticket"""
        created_by = self._brief_user(row, "created_by")
        assigned_to = self._brief_user(row, "assigned_to") if row["assigned_to_id"] else None
        return Ticket(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            status=TicketStatus(row["status"]),
            priority=TicketPriority(row["priority"]),
            tags=list(row["tags"] or []),
            department_id=row["department_id"],
            created_by_id=row["created_by_id"],
            assigned_to_id=row["assigned_to_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            created_by=created_by,
            assigned_to=assigned_to,
            response_count=row["response_count"],
        )
