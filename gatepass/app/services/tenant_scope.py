"""
Tenant scoping.

Every privileged operation resolves the caller's membership in the target
organization from the store. Roles shown by the client are never trusted.
"""

from typing import Callable, Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import Membership, MembershipRole, OrganizationStatus

RoleGate = Callable[[MembershipRole], bool]


async def require_membership(
    uow: UnitOfWork,
    user_id: UUID,
    organization_id: UUID,
    gate: Optional[RoleGate] = None,
    denied_message: str = "Your role does not allow this operation",
) -> Result[Membership]:
    """
    Resolve the caller's active membership in an organization.

    Errors:
        NOT_A_MEMBER: no active membership (also for unknown organizations)
        ORGANIZATION_SUSPENDED: the organization is suspended
        INSUFFICIENT_ROLE: the membership's role fails ``gate``
    """
    membership = await uow.memberships.get_by_user_and_organization(
        user_id, organization_id
    )
    if membership is None or not membership.is_active:
        return Return.err(
            Error("NOT_A_MEMBER", "You are not a member of this organization")
        )

    organization = await uow.organizations.get_by_id(organization_id)
    if organization is None:
        return Return.err(
            Error("NOT_A_MEMBER", "You are not a member of this organization")
        )
    if organization.status == OrganizationStatus.suspended:
        return Return.err(
            Error("ORGANIZATION_SUSPENDED", "Organization has been suspended")
        )

    if gate is not None and not gate(membership.role):
        return Return.err(Error("INSUFFICIENT_ROLE", denied_message))

    return Return.ok(membership)
