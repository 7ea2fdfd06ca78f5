"""
Membership API Routes

Handles the tenant directory: listing and switching memberships, and member
administration.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from gatepass.api.error import raise_error
from gatepass.api.utils.ids import parse_uuid
from gatepass.app.services.clock import IClock
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.app.use_cases.memberships import (
    AddMemberCommand,
    AddMemberUseCase,
    DeactivateMemberResponse,
    DeactivateMemberUseCase,
    ListMembershipsUseCase,
    MembershipListResponse,
    MembershipResponse,
    SwitchActiveMembershipUseCase,
)
from gatepass.depends import (
    get_active_membership,
    get_clock,
    get_current_user,
    get_unit_of_work,
)

router = APIRouter(tags=["Memberships"])


class SwitchMembershipRequest(BaseModel):
    membership_id: str = Field(..., description="Membership to make active")


class AddMemberRequest(BaseModel):
    user_id: str = Field(..., description="Existing user to add")
    role: str = Field(..., description="resident/admin/guard/super_admin")
    unit_id: Optional[str] = Field(None, description="Required for residents")


@router.get(
    "/memberships", status_code=status.HTTP_200_OK, response_model=MembershipListResponse
)
async def list_memberships(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List the caller's memberships"""
    result = await ListMembershipsUseCase(uow).execute(current_user["user_id"])

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.get(
    "/memberships/active", status_code=status.HTTP_200_OK, response_model=MembershipResponse
)
async def get_active(membership: MembershipResponse = Depends(get_active_membership)):
    """Active membership with its permissions"""
    return membership


@router.post(
    "/memberships/switch", status_code=status.HTTP_200_OK, response_model=MembershipResponse
)
async def switch_membership(
    request: SwitchMembershipRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Switch Active Membership

    Raises:
        - 400 Bad Request: Invalid membership_id format
        - 403 Forbidden: MEMBERSHIP_INACTIVE or ORGANIZATION_SUSPENDED
        - 404 Not Found: MEMBERSHIP_NOT_FOUND
    """
    membership_id = parse_uuid(
        request.membership_id, "INVALID_MEMBERSHIP_ID", "membership ID"
    )

    result = await SwitchActiveMembershipUseCase(uow).execute(
        current_user["user_id"], membership_id
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.post(
    "/organizations/{organization_id}/members",
    status_code=status.HTTP_201_CREATED,
    response_model=MembershipResponse,
)
async def add_member(
    organization_id: str,
    request: AddMemberRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """
    Add Member

    Raises:
        - 400 Bad Request: invalid role, or resident without unit
        - 403 Forbidden: INSUFFICIENT_ROLE or NOT_A_MEMBER
        - 404 Not Found: user or unit not found
        - 409 Conflict: ALREADY_MEMBER
    """
    org_uuid = parse_uuid(organization_id, "INVALID_ORGANIZATION_ID", "organization ID")
    command = AddMemberCommand(
        user_id=parse_uuid(request.user_id, "INVALID_USER_ID", "user ID"),
        role=request.role,
        unit_id=parse_uuid(request.unit_id, "INVALID_UNIT_ID", "unit ID"),
    )

    result = await AddMemberUseCase(uow, clock).execute(
        current_user["user_id"], org_uuid, command
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.delete(
    "/organizations/{organization_id}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeactivateMemberResponse,
)
async def deactivate_member(
    organization_id: str,
    user_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """
    Deactivate Member

    Soft delete: the membership is kept with status inactive.
    """
    org_uuid = parse_uuid(organization_id, "INVALID_ORGANIZATION_ID", "organization ID")
    target_uuid = parse_uuid(user_id, "INVALID_USER_ID", "user ID")

    result = await DeactivateMemberUseCase(uow, clock).execute(
        current_user["user_id"], org_uuid, target_uuid
    )

    if result.is_err():
        raise_error(result.error)

    return result.value
