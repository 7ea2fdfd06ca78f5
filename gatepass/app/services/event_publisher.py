"""
Invitation change notifications.

Published after a mutation has been committed. Listeners (UI lists, realtime
sockets) are leaves: a slow, failing or missing listener never changes the
outcome of the operation that published.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID


@dataclass(frozen=True)
class InvitationChangedEvent:
    invitation_id: UUID
    organization_id: UUID
    unit_id: UUID
    change: str  # created / admitted / cancelled
    status: str
    current_uses: int
    max_uses: Optional[int]
    occurred_at: datetime

    def as_payload(self) -> Dict[str, Any]:
        return {
            "type": "invitation_changed",
            "invitation_id": str(self.invitation_id),
            "organization_id": str(self.organization_id),
            "unit_id": str(self.unit_id),
            "change": self.change,
            "status": self.status,
            "current_uses": self.current_uses,
            "max_uses": self.max_uses,
            "occurred_at": self.occurred_at.isoformat() + "Z",
        }


class IInvitationEventPublisher(ABC):
    """Invitation change channel - application layer"""

    @abstractmethod
    async def publish(self, event: InvitationChangedEvent) -> None:
        """Deliver the event to current listeners; must not raise"""
        pass
