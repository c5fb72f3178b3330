"""
Department Model

A department groups agents and receives tickets. Its keywords drive
automatic ticket routing.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4


@dataclass
class Department:
    """
    Department entity.

    Names are unique. user_count and ticket_count are computed by the
    storage when the department is loaded.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    keywords: List[str] = field(default_factory=list)   # lowercase routing keywords
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    user_count: int = 0
    ticket_count: int = 0

    def to_dict(self, users: Optional[list] = None) -> dict:
        """Convert to dictionary for API response"""
        result = {
            "id": str(self.id),
            "name": self.name,
            "keywords": list(self.keywords),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "counts": {
                "users": self.user_count,
                "tickets": self.ticket_count,
            },
        }
        if users is not None:
            result["users"] = users
        return result

    def to_brief(self) -> dict:
        return {"id": str(self.id), "name": self.name}
