from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.admission import derive_status
from gatepass.domain.permissions import is_unit_bound

from .dtos import InvitationResponse


class GetInvitationUseCase:
    """
    Business Rules:
    - Visible to active members of the invitation's organization
    - Residents only see invitations of their own unit
    - Everything else is INVITATION_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork, clock: IClock):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, invitation_id: UUID, actor_id: UUID
    ) -> Result[InvitationResponse]:
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
            if is_unit_bound(membership) and invitation.unit_id != membership.unit_id:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            return Return.ok(
                InvitationResponse.from_invitation(
                    invitation, derive_status(invitation, self.clock.now())
                )
            )
