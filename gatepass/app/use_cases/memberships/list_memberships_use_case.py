from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.unit_of_work import UnitOfWork

from ._loading import describe_membership
from .dtos import MembershipListResponse


class ListMembershipsUseCase:
    """
    Business Rules:
    - Lists the caller's active memberships across all organizations
    - Memberships of suspended organizations are listed, flagged by
      organization_status, so the user knows why they cannot switch
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[MembershipListResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            memberships = await self.uow.memberships.get_by_user_id(user_id)

            items = []
            for membership in memberships:
                if not membership.is_active:
                    continue
                described = await describe_membership(self.uow, membership)
                if described is not None:
                    items.append(described)

            return Return.ok(
                MembershipListResponse(
                    memberships=items,
                    active_membership_id=(
                        str(user.active_membership_id)
                        if user.active_membership_id
                        else None
                    ),
                )
            )
