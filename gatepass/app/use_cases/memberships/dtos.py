"""
Membership Use Case DTOs (Data Transfer Objects)
"""

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from gatepass.domain.entities import Membership, Organization, Unit
from gatepass.domain.permissions import permissions_for


# ============================================================================
# Command DTOs
# ============================================================================


class AddMemberCommand(BaseModel):
    user_id: UUID
    role: str
    unit_id: Optional[UUID] = None


# ============================================================================
# Response DTOs
# ============================================================================


class MembershipResponse(BaseModel):
    """A membership with its organization, unit and derived permissions"""

    id: str
    user_id: str
    organization_id: str
    organization_name: str
    organization_status: str
    unit_id: Optional[str]
    unit_number: Optional[str]
    building: Optional[str]
    role: str
    status: str
    permissions: Dict[str, bool]

    @classmethod
    def build(
        cls,
        membership: Membership,
        organization: Organization,
        unit: Optional[Unit] = None,
    ) -> "MembershipResponse":
        return cls(
            id=str(membership.id),
            user_id=str(membership.user_id),
            organization_id=str(organization.id),
            organization_name=organization.name,
            organization_status=organization.status.value,
            unit_id=str(membership.unit_id) if membership.unit_id else None,
            unit_number=unit.unit_number if unit else None,
            building=unit.building if unit else None,
            role=membership.role.value,
            status=membership.status.value,
            permissions=permissions_for(membership),
        )


class MembershipListResponse(BaseModel):
    memberships: List[MembershipResponse]
    active_membership_id: Optional[str]


class DeactivateMemberResponse(BaseModel):
    """Response for deactivate member use case"""

    status: str
