"""
Lookup Invitation Use Case

Dry run of the gate check: shows the guard who the invitation is for and what
admission would decide right now, without consuming a use or writing a log.
"""

from typing import Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.invitation_finder import find_invitation_by_code
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.admission import decide
from gatepass.domain.codes import PresentedCode, parse_code
from gatepass.domain.permissions import can_scan_access

from .dtos import InvitationResponse, LookupInvitationResponse


class LookupInvitationUseCase:
    """
    Business Rules:
    - Caller must be allowed to scan access in the organization
    - QR payloads are matched exactly, short codes trimmed and uppercased
    - Unknown, malformed and foreign codes are all INVITATION_NOT_FOUND
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        qr_prefix: str,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.qr_prefix = qr_prefix
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(
        self, code: str, organization_id: UUID, actor_id: UUID
    ) -> Result[LookupInvitationResponse]:
        presented = parse_code(code, self.qr_prefix)

        try:
            return await with_store_retry(
                lambda: self._run(presented, organization_id, actor_id),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Invitation store is unavailable, try again")
            )

    async def _run(
        self, presented: Optional[PresentedCode], organization_id: UUID, actor_id: UUID
    ) -> Result[LookupInvitationResponse]:
        async with self.uow:
            scope = await require_membership(
                self.uow,
                actor_id,
                organization_id,
                gate=can_scan_access,
                denied_message="Your role cannot validate access",
            )
            if scope.is_err():
                return scope

            invitation = await find_invitation_by_code(
                self.uow, presented, organization_id
            )
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            decision = decide(invitation, self.clock.now())

            return Return.ok(
                LookupInvitationResponse(
                    invitation=InvitationResponse.from_invitation(
                        invitation, decision.status
                    ),
                    admissible=decision.admit,
                    reason=decision.reason.value if decision.reason else None,
                )
            )
