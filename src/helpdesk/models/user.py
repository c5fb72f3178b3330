"""
User Model

Represents a helpdesk user: an employee raising tickets, an agent working
them, or an admin running the portal.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class UserRole(str, Enum):
    """Roles known to the helpdesk"""
    EMPLOYEE = "EMPLOYEE"   # Base authenticated role
    AGENT = "AGENT"         # Staff working a department's tickets
    ADMIN = "ADMIN"         # Manages departments and sends test notifications


@dataclass
class User:
    """
    User entity.

    Each user:
    - Has exactly one role
    - Optionally belongs to a department (agents always should)
    - Owns the notifications targeted at them
    """
    id: UUID = field(default_factory=uuid4)
    email: str = ""
    password_hash: Optional[str] = None
    name: str = ""
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    department_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Filled by listing queries only
    assigned_ticket_count: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        result = {
            "id": str(self.id),
            "email": self.email,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "role": self.role.value,
            "department_id": str(self.department_id) if self.department_id else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
        if self.assigned_ticket_count is not None:
            result["assigned_ticket_count"] = self.assigned_ticket_count
        return result

    def to_brief(self) -> dict:
        """Short form embedded in tickets"""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "avatar_url": self.avatar_url,
        }

    def to_member(self) -> dict:
        """Entry in a department's member list"""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.isoformat(),
        }
