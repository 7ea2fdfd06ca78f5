"""
Add Member Use Case

Handles administrators adding an existing user to their organization.
"""

import logging
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import Membership, MembershipRole, MembershipStatus
from gatepass.domain.permissions import can_manage_users

from ._loading import describe_membership
from .dtos import AddMemberCommand, MembershipResponse

logger = logging.getLogger(__name__)


class AddMemberUseCase:
    """
    Use case for adding a member to an organization.

    Business Rules:
    - Only admins and super_admins can add members
    - Only a super_admin can grant super_admin
    - Residents must be assigned a unit of the organization
    - A user already active in the organization is ALREADY_MEMBER
    - A previously deactivated membership is reactivated with the new role
    """

    def __init__(self, uow: UnitOfWork, clock: IClock):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, actor_id: UUID, organization_id: UUID, command: AddMemberCommand
    ) -> Result[MembershipResponse]:
        try:
            role = MembershipRole(command.role)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {command.role}. Must be one of: "
                    "resident, admin, guard, super_admin",
                )
            )

        async with self.uow:
            scope = await require_membership(
                self.uow,
                actor_id,
                organization_id,
                gate=can_manage_users,
                denied_message="Only administrators can add members",
            )
            if scope.is_err():
                return scope
            actor = scope.value

            if role == MembershipRole.super_admin and actor.role != MembershipRole.super_admin:
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE",
                        "Only a super admin can grant the super admin role",
                    )
                )

            user = await self.uow.users.get_by_id(command.user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if command.unit_id is not None:
                unit = await self.uow.units.get_by_id(command.unit_id)
                if unit is None or unit.organization_id != organization_id:
                    return Return.err(Error("UNIT_NOT_FOUND", "Unit not found"))
            elif role == MembershipRole.resident:
                return Return.err(
                    Error("UNIT_REQUIRED", "Residents must be assigned a unit")
                )

            membership = await self.uow.memberships.get_by_user_and_organization(
                command.user_id, organization_id
            )
            if membership is not None and membership.is_active:
                return Return.err(
                    Error(
                        "ALREADY_MEMBER",
                        "User is already a member of this organization",
                    )
                )

            if membership is not None:
                membership.role = role
                membership.unit_id = command.unit_id
                membership.status = MembershipStatus.active
                membership.deactivated_at = None
                membership = await self.uow.memberships.update(membership)
            else:
                membership = await self.uow.memberships.create(
                    Membership(
                        user_id=command.user_id,
                        organization_id=organization_id,
                        unit_id=command.unit_id,
                        role=role,
                        status=MembershipStatus.active,
                        created_at=self.clock.now(),
                    )
                )

            described = await describe_membership(self.uow, membership)
            await self.uow.commit()

        logger.info(
            f"User {command.user_id} added to organization {organization_id} "
            f"as {role.value} by {actor_id}"
        )
        return Return.ok(described)
