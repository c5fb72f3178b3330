"""
User Storage

PostgreSQL storage for users.
"""
import logging
from typing import Optional, List, Sequence
from uuid import UUID

from .base import BaseStorage
from ..models.user import User, UserRole

logger = logging.getLogger("helpdesk.storage.user")

_USER_COLUMNS = """
    u.id, u.email, u.password_hash, u.name, u.avatar_url, u.role::text AS role,
    u.department_id, u.created_at, u.updated_at
"""


class UserStorage(BaseStorage):
    """Storage for User entities"""

    async def create(self, user: User) -> User:
        """Create a new user"""
        query = f"""
            WITH u AS (
                INSERT INTO users (
                    id, email, password_hash, name, avatar_url, role,
                    department_id, created_at, updated_at
                )
                VALUES ($1, $2, $3, $4, $5, $6::user_role, $7, $8, $9)
                RETURNING *
            )
            SELECT {_USER_COLUMNS} FROM u
        """
        row = await self.fetchrow(
            query,
            user.id, user.email.lower(), user.password_hash, user.name,
            user.avatar_url, user.role.value, user.department_id,
            user.created_at, user.updated_at
        )
        return self._row_to_user(row)

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        query = f"SELECT {_USER_COLUMNS} FROM users u WHERE u.id = $1"
        row = await self.fetchrow(query, user_id)
        return self._row_to_user(row) if row else None

    async def exists_by_email(self, email: str) -> bool:
        """Check if user with email exists"""
        result = await self.fetchval("SELECT 1 FROM users WHERE email = $1", email.lower())
        return result is not None

    async def list_by_department(self, department_id: UUID) -> List[User]:
        """All members of a department, ordered by name"""
        query = f"""
            SELECT {_USER_COLUMNS} FROM users u
            WHERE u.department_id = $1
            ORDER BY u.name
        """
        rows = await self.fetch(query, department_id)
        return [self._row_to_user(row) for row in rows]

    async def list_staff_by_department(
        self,
        department_id: UUID,
        roles: Sequence[UserRole],
        offset: int = 0,
        limit: int = 10,
    ) -> List[User]:
        """Department members with one of the given roles, with assigned ticket counts"""
        query = f"""
            SELECT {_USER_COLUMNS},
                   (SELECT COUNT(*) FROM tickets t WHERE t.assigned_to_id = u.id) AS assigned_ticket_count
            FROM users u
            WHERE u.department_id = $1 AND u.role = ANY($2::user_role[])
            ORDER BY u.name
            OFFSET $3 LIMIT $4
        """
        rows = await self.fetch(query, department_id, [r.value for r in roles], offset, limit)
        return [self._row_to_user(row) for row in rows]

    async def count_by_department(
        self, department_id: UUID, roles: Optional[Sequence[UserRole]] = None
    ) -> int:
        """Count department members, optionally restricted to roles"""
        if roles:
            query = """
                SELECT COUNT(*) FROM users
                WHERE department_id = $1 AND role = ANY($2::user_role[])
            """
            return await self.fetchval(query, department_id, [r.value for r in roles])
        query = "SELECT COUNT(*) FROM users WHERE department_id = $1"
        return await self.fetchval(query, department_id)

    async def list_ids_by_role(
        self, role: UserRole, department_id: Optional[UUID] = None
    ) -> List[UUID]:
        """IDs of users with a role, optionally within a department"""
        if department_id:
            query = """
                SELECT id FROM users
                WHERE role = $1::user_role AND department_id = $2
                ORDER BY name
            """
            rows = await self.fetch(query, role.value, department_id)
        else:
            query = "SELECT id FROM users WHERE role = $1::user_role ORDER BY name"
            rows = await self.fetch(query, role.value)
        return [row["id"] for row in rows]

    def _row_to_user(self, row) -> User:
        """Convert database row to User"""
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            name=row["name"],
            avatar_url=row["avatar_url"],
            role=UserRole(row["role"]),
            department_id=row["department_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            assigned_ticket_count=row.get("assigned_ticket_count"),
        )
