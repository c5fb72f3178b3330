"""
Department Service

Business logic for department management, staffing and statistics.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, List, Tuple
from uuid import UUID

from ..models.department import Department
from ..models.ticket import Ticket, TicketStatus, TicketPriority
from ..models.user import User, UserRole
from ..storage.department_storage import DepartmentStorage
from ..storage.ticket_storage import TicketStorage
from ..storage.user_storage import UserStorage

logger = logging.getLogger("helpdesk.services.department")

STAFF_ROLES = (UserRole.AGENT, UserRole.ADMIN)


class DepartmentService:
    """Service for department management"""

    def __init__(
        self,
        department_storage: DepartmentStorage,
        user_storage: UserStorage,
        ticket_storage: TicketStorage,
    ):
        self.storage = department_storage
        self.user_storage = user_storage
        self.ticket_storage = ticket_storage

    async def create_department(self, name: str, keywords: List[str]) -> Department:
        """
        Create a new department.

        Args:
            name: Department name, unique across the helpdesk
            keywords: Routing keywords (normalized to trimmed lowercase)

        Returns:
            Created department

        Raises:
            ValueError: If the name is taken or no usable keyword remains
        """
        name = name.strip()

        if await self.storage.get_by_name(name):
            raise ValueError("Department with this name already exists")

        department = Department(name=name, keywords=self.clean_keywords(keywords))
        created = await self.storage.create(department)
        logger.info(f"Created department: {created.name} ({created.id})")
        return created

    async def get_department(self, department_id: UUID) -> Optional[Department]:
        """Get department by ID"""
        return await self.storage.get_by_id(department_id)

    async def get_members(self, department_id: UUID) -> List[User]:
        """All users of a department, ordered by name"""
        return await self.user_storage.list_by_department(department_id)

    async def list_departments(self, offset: int, limit: int) -> Tuple[List[Department], int]:
        """One page of departments ordered by name, plus the total count"""
        departments = await self.storage.list_page(offset, limit)
        total = await self.storage.count()
        return departments, total

    async def update_department(
        self,
        department_id: UUID,
        name: Optional[str] = None,
        keywords: Optional[List[str]] = None,
    ) -> Optional[Department]:
        """
        Update department.

        Returns:
            Updated department or None if not found

        Raises:
            ValueError: If the new name is taken or keywords are unusable
        """
        department = await self.storage.get_by_id(department_id)
        if not department:
            return None

        name = name.strip() if name else None
        if name and name != department.name:
            if await self.storage.get_by_name(name):
                raise ValueError("Department with this name already exists")

        if keywords is not None:
            department.keywords = self.clean_keywords(keywords)

        if name:
            department.name = name

        updated = await self.storage.update(department)
        logger.info(f"Updated department: {updated.name}")
        return updated

    async def delete_department(self, department_id: UUID) -> bool:
        """
        Delete a department that has no users and no tickets.

        Returns:
            False if the department does not exist

        Raises:
            ValueError: If users or tickets still reference the department
        """
        department = await self.storage.get_by_id(department_id)
        if not department:
            return False

        if department.user_count > 0:
            raise ValueError(
                "Cannot delete department with assigned users. Please reassign users first."
            )
        if department.ticket_count > 0:
            raise ValueError(
                "Cannot delete department with existing tickets. "
                "Please resolve or reassign tickets first."
            )

        result = await self.storage.delete(department_id)
        if result:
            logger.info(f"Deleted department: {department.name} ({department_id})")
        return result

    async def list_agents(
        self, department_id: UUID, offset: int, limit: int
    ) -> Tuple[List[User], int]:
        """Agents and admins of a department, plus the total count"""
        agents = await self.user_storage.list_staff_by_department(
            department_id, STAFF_ROLES, offset, limit
        )
        total = await self.user_storage.count_by_department(department_id, STAFF_ROLES)
        return agents, total

    async def list_tickets(
        self, department_id: UUID, offset: int, limit: int
    ) -> Tuple[List[Ticket], int]:
        """Tickets of a department, newest first, plus the total count"""
        tickets = await self.ticket_storage.list_by_department(department_id, offset, limit)
        total = await self.ticket_storage.count_by_department(department_id)
        return tickets, total

    async def get_statistics(
        self, department: Department, now: Optional[datetime] = None
    ) -> dict:
        """
        Ticket and staffing statistics for a department.

        Month starts on day 1 at midnight, week on the latest Sunday at
        midnight (both UTC).
        """
        now = now or datetime.utcnow()
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        days_since_sunday = (now.weekday() + 1) % 7
        start_of_week = (now - timedelta(days=days_since_sunday)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )

        by_status = await self.ticket_storage.count_by_status(department.id)
        by_priority = await self.ticket_storage.count_by_priority(department.id)
        total_tickets = sum(by_status.values())
        total_agents = await self.user_storage.count_by_department(department.id, STAFF_ROLES)
        tickets_this_month = await self.ticket_storage.count_created_since(
            department.id, start_of_month
        )
        tickets_this_week = await self.ticket_storage.count_created_since(
            department.id, start_of_week
        )
        recent = await self.ticket_storage.list_by_department(department.id, 0, 5)

        open_tickets = by_status.get(TicketStatus.OPEN, 0)
        in_progress = by_status.get(TicketStatus.IN_PROGRESS, 0)
        resolved = by_status.get(TicketStatus.RESOLVED, 0)
        closed = by_status.get(TicketStatus.CLOSED, 0)

        resolution_rate = 0.0
        if total_tickets > 0:
            resolution_rate = round((resolved + closed) / total_tickets * 100, 2)

        return {
            "department": department.to_brief(),
            "overview": {
                "total_tickets": total_tickets,
                "open_tickets": open_tickets,
                "in_progress_tickets": in_progress,
                "resolved_tickets": resolved,
                "closed_tickets": closed,
                "high_priority_tickets": by_priority.get(TicketPriority.HIGH, 0),
                "total_agents": total_agents,
                "resolution_rate": resolution_rate,
            },
            "time_based_stats": {
                "tickets_this_month": tickets_this_month,
                "tickets_this_week": tickets_this_week,
            },
            "distributions": {
                "by_priority": {
                    "low": by_priority.get(TicketPriority.LOW, 0),
                    "medium": by_priority.get(TicketPriority.MEDIUM, 0),
                    "high": by_priority.get(TicketPriority.HIGH, 0),
                },
                "by_status": {
                    "open": open_tickets,
                    "in_progress": in_progress,
                    "resolved": resolved,
                    "closed": closed,
                },
            },
            "recent_activity": {
                "recent_tickets": [t.to_dict() for t in recent],
            },
        }

    @staticmethod
    def clean_keywords(keywords: List[str]) -> List[str]:
        """Trim and lowercase keywords, dropping empties"""
        if not keywords:
            raise ValueError("At least one keyword is required for AI routing")
        cleaned = [k.strip().lower() for k in keywords]
        cleaned = [k for k in cleaned if k]
        if not cleaned:
            raise ValueError("Valid keywords are required for AI routing")
        return cleaned
