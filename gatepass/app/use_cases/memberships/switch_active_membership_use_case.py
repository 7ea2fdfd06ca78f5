"""
Switch Active Membership Use Case

Handles a user moving their session to another organization they belong to.
"""

import logging
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import OrganizationStatus

from ._loading import describe_membership
from .dtos import MembershipResponse

logger = logging.getLogger(__name__)


class SwitchActiveMembershipUseCase:
    """
    Use case for switching the active membership.

    Business Rules:
    - The membership must belong to the caller (otherwise MEMBERSHIP_NOT_FOUND)
    - The membership must be active
    - The organization must not be suspended
    - The choice is stored on the user; later requests act in that organization
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, membership_id: UUID
    ) -> Result[MembershipResponse]:
        """
        Execute switch active membership use case.

        Args:
            user_id: Current authenticated user ID
            membership_id: Membership to make active

        Returns:
            Result with the new active MembershipResponse, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            membership = await self.uow.memberships.get_by_id(membership_id)
            if membership is None or membership.user_id != user_id:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "Membership not found")
                )

            if not membership.is_active:
                return Return.err(
                    Error("MEMBERSHIP_INACTIVE", "Membership has been deactivated")
                )

            described = await describe_membership(self.uow, membership)
            if described is None:
                return Return.err(
                    Error("MEMBERSHIP_NOT_FOUND", "Membership not found")
                )
            if described.organization_status == OrganizationStatus.suspended.value:
                return Return.err(
                    Error(
                        "ORGANIZATION_SUSPENDED",
                        "Cannot switch to a suspended organization",
                    )
                )

            user.active_membership_id = membership.id
            await self.uow.users.update(user)
            await self.uow.commit()

        logger.info(
            f"User {user_id} switched to organization {described.organization_id}"
        )
        return Return.ok(described)
