"""
Realtime invitation updates.

One websocket per client; the client receives ``invitation_changed`` events of
its active organization. The socket only listens, all mutations go through
the HTTP routes.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from gatepass.adapter.services.event_publisher import InMemoryInvitationEventPublisher
from gatepass.app.services.event_publisher import InvitationChangedEvent
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.app.use_cases.memberships import ResolveActiveMembershipUseCase
from gatepass.depends import decode_user_id, get_event_publisher, get_unit_of_work

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


@router.websocket("/ws/invitations")
async def invitation_updates(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    publisher: InMemoryInvitationEventPublisher = Depends(get_event_publisher),
):
    if not token:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Authentication token missing"
        )
        return

    try:
        user_id = decode_user_id(token)
    except HTTPException:
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason="Invalid or expired token"
        )
        return

    result = await ResolveActiveMembershipUseCase(uow).execute(user_id)
    if result.is_err():
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason=result.error.message
        )
        return
    organization_id = UUID(result.value.organization_id)

    await websocket.accept()

    async def forward(event: InvitationChangedEvent) -> None:
        await websocket.send_json(event.as_payload())

    unsubscribe = publisher.subscribe(organization_id, forward)
    logger.info(f"Realtime listener connected for organization {organization_id}")
    try:
        while True:
            # Client messages are ignored; receiving detects the disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Realtime listener disconnected for organization {organization_id}")
    finally:
        unsubscribe()
