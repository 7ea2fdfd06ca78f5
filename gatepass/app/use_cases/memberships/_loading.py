from typing import Optional

from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import Membership

from .dtos import MembershipResponse


async def describe_membership(
    uow: UnitOfWork, membership: Membership
) -> Optional[MembershipResponse]:
    """Load organization and unit for a membership; None if its organization is gone"""
    organization = await uow.organizations.get_by_id(membership.organization_id)
    if organization is None:
        return None
    unit = None
    if membership.unit_id is not None:
        unit = await uow.units.get_by_id(membership.unit_id)
    return MembershipResponse.build(membership, organization, unit)
