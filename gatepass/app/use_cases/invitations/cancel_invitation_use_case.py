"""
Cancel Invitation Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.event_publisher import (
    IInvitationEventPublisher,
    InvitationChangedEvent,
)
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import InvitationStatus
from gatepass.domain.permissions import can_manage_users

from .dtos import CancelInvitationResponse

logger = logging.getLogger(__name__)


class CancelInvitationUseCase:
    """
    Use case for cancelling an invitation.

    Business Rules:
    - Allowed for the invitation's creator or a manager of its organization
    - Callers without an active membership in the invitation's organization
      get INVITATION_NOT_FOUND, never a hint that it exists
    - Idempotent: cancelling a cancelled invitation succeeds and changes nothing
    - Cancellation is final; admission always denies afterwards
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        publisher: Optional[IInvitationEventPublisher] = None,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.publisher = publisher
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(
        self, invitation_id: UUID, actor_id: UUID
    ) -> Result[CancelInvitationResponse]:
        try:
            return await with_store_retry(
                lambda: self._run(invitation_id, actor_id),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Invitation store is unavailable, try again")
            )

    async def _run(
        self, invitation_id: UUID, actor_id: UUID
    ) -> Result[CancelInvitationResponse]:
        now = self.clock.now()

        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            scope = await require_membership(
                self.uow, actor_id, invitation.organization_id
            )
            if scope.is_err():
                if scope.error.code == "NOT_A_MEMBER":
                    return Return.err(
                        Error("INVITATION_NOT_FOUND", "Invitation not found")
                    )
                return scope
            membership = scope.value

            if invitation.created_by != actor_id and not can_manage_users(
                membership.role
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE",
                        "Only the creator or an administrator can cancel this invitation",
                    )
                )

            if invitation.cancelled:
                return Return.ok(
                    CancelInvitationResponse(
                        invitation_id=str(invitation.id),
                        status=InvitationStatus.cancelled.value,
                    )
                )

            changed = await self.uow.invitations.cancel(invitation.id, actor_id, now)
            await self.uow.commit()

        if changed:
            logger.info(f"Invitation {invitation_id} cancelled by {actor_id}")
            if self.publisher is not None:
                await self.publisher.publish(
                    InvitationChangedEvent(
                        invitation_id=invitation.id,
                        organization_id=invitation.organization_id,
                        unit_id=invitation.unit_id,
                        change="cancelled",
                        status=InvitationStatus.cancelled.value,
                        current_uses=invitation.current_uses,
                        max_uses=invitation.max_uses,
                        occurred_at=now,
                    )
                )

        return Return.ok(
            CancelInvitationResponse(
                invitation_id=str(invitation_id),
                status=InvitationStatus.cancelled.value,
            )
        )
