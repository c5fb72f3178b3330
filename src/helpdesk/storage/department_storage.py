"""
Department Storage

PostgreSQL storage for departments.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.department import Department

logger = logging.getLogger("helpdesk.storage.department")

_DEPARTMENT_SELECT = """
    SELECT d.id, d.name, d.keywords, d.created_at, d.updated_at,
           (SELECT COUNT(*) FROM users u WHERE u.department_id = d.id) AS user_count,
           (SELECT COUNT(*) FROM tickets t WHERE t.department_id = d.id) AS ticket_count
    FROM departments d
"""


class DepartmentStorage(BaseStorage):
    """Storage for Department entities"""

    async def create(self, department: Department) -> Department:
        """Create a new department"""
        query = """
            INSERT INTO departments (id, name, keywords, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5)
        """
        await self.execute(
            query,
            department.id,
            department.name,
            department.keywords,
            department.created_at,
            department.updated_at
        )
        return await self.get_by_id(department.id)

    async def get_by_id(self, department_id: UUID) -> Optional[Department]:
        """Get department by ID"""
        row = await self.fetchrow(f"{_DEPARTMENT_SELECT} WHERE d.id = $1", department_id)
        return self._row_to_department(row) if row else None

    async def get_by_name(self, name: str) -> Optional[Department]:
        """Get department by exact name"""
        row = await self.fetchrow(f"{_DEPARTMENT_SELECT} WHERE d.name = $1", name)
        return self._row_to_department(row) if row else None

    async def list_page(self, offset: int = 0, limit: int = 10) -> List[Department]:
        """List departments ordered by name"""
        rows = await self.fetch(
            f"{_DEPARTMENT_SELECT} ORDER BY d.name OFFSET $1 LIMIT $2", offset, limit
        )
        return [self._row_to_department(row) for row in rows]

    async def count(self) -> int:
        """Total number of departments"""
        return await self.fetchval("SELECT COUNT(*) FROM departments")

    async def update(self, department: Department) -> Department:
        """Update department name and keywords"""
        department.updated_at = datetime.utcnow()
        query = """
            UPDATE departments
            SET name = $2, keywords = $3, updated_at = $4
            WHERE id = $1
        """
        await self.execute(
            query,
            department.id,
            department.name,
            department.keywords,
            department.updated_at
        )
        return await self.get_by_id(department.id)

    async def delete(self, department_id: UUID) -> bool:
        """Hard delete department"""
        result = await self.execute("DELETE FROM departments WHERE id = $1", department_id)
        return self._affected(result) == 1

    def _row_to_department(self, row) -> Department:
        """Convert database row to Department"""
        return Department(
            id=row["id"],
            name=row["name"],
            keywords=list(row["keywords"] or []),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            user_count=row["user_count"],
            ticket_count=row["ticket_count"],
        )
