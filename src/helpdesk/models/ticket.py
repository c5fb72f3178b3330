"""
Ticket Model

Support request raised by a user and handled by a department.
Only the read side is used by the department endpoints.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4


class TicketStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class TicketPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Ticket:
    """Ticket entity"""
    id: UUID = field(default_factory=uuid4)
    title: str = ""
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = TicketPriority.MEDIUM
    tags: List[str] = field(default_factory=list)
    department_id: UUID = field(default_factory=uuid4)
    created_by_id: UUID = field(default_factory=uuid4)
    assigned_to_id: Optional[UUID] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Joined data (present when loaded through listing queries)
    created_by: Optional[dict] = None
    assigned_to: Optional[dict] = None
    response_count: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        result = {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "tags": list(self.tags),
            "department_id": str(self.department_id),
            "created_by_id": str(self.created_by_id),
            "assigned_to_id": str(self.assigned_to_id) if self.assigned_to_id else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
        }
        if self.response_count is not None:
            result["response_count"] = self.response_count
        return result
