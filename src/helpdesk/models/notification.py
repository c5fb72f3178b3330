"""
Notification Model

In-app notification owned by a single user.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class NotificationType(str, Enum):
    """Events that produce notifications"""
    TICKET_CREATED = "TICKET_CREATED"
    TICKET_ASSIGNED = "TICKET_ASSIGNED"
    TICKET_STATUS_UPDATED = "TICKET_STATUS_UPDATED"
    TICKET_RESPONSE = "TICKET_RESPONSE"
    SLA_WARNING = "SLA_WARNING"
    ASSIGNMENT = "ASSIGNMENT"
    PATTERN_DETECTED = "PATTERN_DETECTED"
    SYSTEM_NOTIFICATION = "SYSTEM_NOTIFICATION"


@dataclass
class Notification:
    """
    Notification entity.

    read_at is set the first time the notification is marked read and is
    never moved afterwards.
    """
    id: UUID = field(default_factory=uuid4)
    message: str = ""
    type: NotificationType = NotificationType.SYSTEM_NOTIFICATION
    read: bool = False
    read_at: Optional[datetime] = None
    target_user_id: UUID = field(default_factory=uuid4)
    ticket_id: Optional[UUID] = None
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "message": self.message,
            "type": self.type.value,
            "read": self.read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "target_user_id": str(self.target_user_id),
            "ticket_id": str(self.ticket_id) if self.ticket_id else None,
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
        }
