"""
Deactivate Member Use Case

Handles removing (soft delete) members from an organization.
"""

import logging
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import MembershipRole, MembershipStatus
from gatepass.domain.permissions import can_manage_users

from .dtos import DeactivateMemberResponse

logger = logging.getLogger(__name__)


class DeactivateMemberUseCase:
    """
    Use case for deactivating a member.

    Business Rules:
    - Only admins and super_admins can deactivate members
    - An admin cannot deactivate a super_admin
    - Nobody deactivates themselves
    - Soft delete: status=inactive, the row stays
    - Idempotent on an already inactive membership
    - If it was the user's active membership, the choice is cleared
    """

    def __init__(self, uow: UnitOfWork, clock: IClock):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, actor_id: UUID, organization_id: UUID, target_user_id: UUID
    ) -> Result[DeactivateMemberResponse]:
        """
        Execute deactivate member use case.

        Args:
            actor_id: User performing the removal
            organization_id: Organization of the actor's active membership
            target_user_id: User whose membership is deactivated

        Returns:
            Result with DeactivateMemberResponse, or Error
        """
        async with self.uow:
            scope = await require_membership(
                self.uow,
                actor_id,
                organization_id,
                gate=can_manage_users,
                denied_message="Only administrators can remove members",
            )
            if scope.is_err():
                return scope
            actor = scope.value

            if actor_id == target_user_id:
                return Return.err(
                    Error("CANNOT_DEACTIVATE_SELF", "You cannot remove yourself")
                )

            target = await self.uow.memberships.get_by_user_and_organization(
                target_user_id, organization_id
            )
            if target is None:
                return Return.err(
                    Error(
                        "MEMBERSHIP_NOT_FOUND",
                        "Target user is not a member of this organization",
                    )
                )

            if (
                actor.role == MembershipRole.admin
                and target.role == MembershipRole.super_admin
            ):
                return Return.err(
                    Error("INSUFFICIENT_ROLE", "Admins cannot remove super admins")
                )

            if not target.is_active:
                return Return.ok(DeactivateMemberResponse(status="inactive"))

            target.status = MembershipStatus.inactive
            target.deactivated_at = self.clock.now()
            await self.uow.memberships.update(target)

            user = await self.uow.users.get_by_id(target_user_id)
            if user is not None and user.active_membership_id == target.id:
                user.active_membership_id = None
                await self.uow.users.update(user)

            await self.uow.commit()

        logger.info(
            f"Membership of user {target_user_id} in organization {organization_id} "
            f"deactivated by {actor_id}"
        )
        return Return.ok(DeactivateMemberResponse(status="inactive"))
