"""
In-process invitation change channel.

Listeners subscribe per organization (the realtime socket does one
subscription per connection). Delivery is best effort: a listener that raises
is logged and skipped.
"""

import logging
from typing import Awaitable, Callable, Dict, List
from uuid import UUID

from gatepass.app.services.event_publisher import (
    IInvitationEventPublisher,
    InvitationChangedEvent,
)

logger = logging.getLogger(__name__)

Listener = Callable[[InvitationChangedEvent], Awaitable[None]]


class InMemoryInvitationEventPublisher(IInvitationEventPublisher):
    def __init__(self):
        self._listeners: Dict[UUID, List[Listener]] = {}

    def subscribe(self, organization_id: UUID, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for one organization's events.

        Returns:
            Function removing the listener again
        """
        self._listeners.setdefault(organization_id, []).append(listener)
        logger.debug(f"Listener subscribed to organization {organization_id}")

        def unsubscribe() -> None:
            listeners = self._listeners.get(organization_id, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(organization_id, None)

        return unsubscribe

    def listener_count(self, organization_id: UUID) -> int:
        return len(self._listeners.get(organization_id, []))

    async def publish(self, event: InvitationChangedEvent) -> None:
        # Copy: listeners may unsubscribe while being notified
        for listener in list(self._listeners.get(event.organization_id, [])):
            try:
                await listener(event)
            except Exception:
                logger.exception(
                    f"Invitation listener failed for {event.invitation_id} "
                    f"({event.change})"
                )
