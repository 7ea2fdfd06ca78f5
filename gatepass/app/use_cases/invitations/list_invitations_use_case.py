"""
List Invitations Use Case
"""

from typing import List, Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.admission import derive_status
from gatepass.domain.entities import InvitationStatus
from gatepass.domain.permissions import can_create_invitations, is_unit_bound

from .dtos import InvitationListResponse, InvitationResponse


class ListInvitationsUseCase:
    """
    Use case for listing a unit's or organization's invitations.

    Business Rules:
    - Residents see their own unit only (asking for another unit is UNIT_NOT_ALLOWED)
    - Admins see any unit of the organization, or all of it when no unit is given
    - Status filter applies to the derived status, not the stored column
    - Newest first
    """

    def __init__(self, uow: UnitOfWork, clock: IClock):
        self.uow = uow
        self.clock = clock

    async def execute(
        self,
        actor_id: UUID,
        organization_id: UUID,
        unit_id: Optional[UUID] = None,
        statuses: Optional[List[str]] = None,
    ) -> Result[InvitationListResponse]:
        wanted = None
        if statuses:
            try:
                wanted = {InvitationStatus(s) for s in statuses}
            except ValueError:
                return Return.err(
                    Error(
                        "INVALID_STATUS",
                        "Status filter must be among: active, used, expired, cancelled",
                    )
                )

        async with self.uow:
            scope = await require_membership(
                self.uow,
                actor_id,
                organization_id,
                gate=can_create_invitations,
                denied_message="Your role cannot view invitations",
            )
            if scope.is_err():
                return scope
            membership = scope.value

            if is_unit_bound(membership):
                if unit_id is not None and unit_id != membership.unit_id:
                    return Return.err(
                        Error(
                            "UNIT_NOT_ALLOWED",
                            "Residents can only view their own unit",
                        )
                    )
                unit_id = membership.unit_id
                if unit_id is None:
                    return Return.ok(InvitationListResponse(invitations=[]))

            if unit_id is not None:
                unit = await self.uow.units.get_by_id(unit_id)
                if unit is None or unit.organization_id != organization_id:
                    return Return.err(Error("UNIT_NOT_FOUND", "Unit not found"))
                invitations = await self.uow.invitations.list_by_unit(unit_id)
            else:
                invitations = await self.uow.invitations.list_by_organization(
                    organization_id
                )

            now = self.clock.now()
            items = []
            for invitation in invitations:
                status = derive_status(invitation, now)
                if wanted is not None and status not in wanted:
                    continue
                items.append(InvitationResponse.from_invitation(invitation, status))

            return Return.ok(InvitationListResponse(invitations=items))
