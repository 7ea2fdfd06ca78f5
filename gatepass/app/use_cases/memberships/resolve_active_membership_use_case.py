"""
Resolve Active Membership Use Case

Determines which organization a request acts in. The client never says which
organization it is in; the server keeps the choice on the user record.
"""

from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import OrganizationStatus

from ._loading import describe_membership
from .dtos import MembershipResponse


class ResolveActiveMembershipUseCase:
    """
    Business Rules:
    - The membership recorded on the user wins if it is still active and its
      organization is not suspended
    - Otherwise the user's most recent usable membership is used
    - No usable membership at all is NO_ACTIVE_MEMBERSHIP
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(self, user_id: UUID) -> Result[MembershipResponse]:
        try:
            return await with_store_retry(
                lambda: self._run(user_id),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Directory is unavailable, try again")
            )

    async def _run(self, user_id: UUID) -> Result[MembershipResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            memberships = await self.uow.memberships.get_by_user_id(user_id)
            memberships.sort(key=lambda m: m.id != user.active_membership_id)

            for membership in memberships:
                if not membership.is_active:
                    continue
                described = await describe_membership(self.uow, membership)
                if (
                    described is not None
                    and described.organization_status == OrganizationStatus.active.value
                ):
                    return Return.ok(described)

            return Return.err(
                Error(
                    "NO_ACTIVE_MEMBERSHIP",
                    "You do not belong to any active organization",
                )
            )
