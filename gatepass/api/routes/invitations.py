"""
Invitation API Routes

Handles invitation creation, listing, lookup and cancellation.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from gatepass.api.error import raise_error
from gatepass.api.utils.ids import parse_uuid
from gatepass.app.services.clock import IClock
from gatepass.app.services.event_publisher import IInvitationEventPublisher
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.app.use_cases.invitations import (
    CancelInvitationResponse,
    CancelInvitationUseCase,
    CreateInvitationCommand,
    CreateInvitationUseCase,
    GetInvitationUseCase,
    InvitationListResponse,
    InvitationResponse,
    ListInvitationsUseCase,
    LookupInvitationResponse,
    LookupInvitationUseCase,
)
from gatepass.app.use_cases.memberships import MembershipResponse
from gatepass.config import ApplicationConfig
from gatepass.depends import (
    get_active_membership,
    get_clock,
    get_current_user,
    get_event_publisher,
    get_unit_of_work,
)

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class CreateInvitationRequest(BaseModel):
    """
    Create invitation HTTP request payload

    Validates incoming request for issuing a visitor invitation.
    """

    visitor_name: str = Field(..., description="Visitor full name (min 2 chars)")
    kind: str = Field("single", description="single/multiple/temporary/permanent")
    unit_id: Optional[str] = Field(None, description="Unit; defaults to your own")
    visitor_phone: Optional[str] = None
    visitor_email: Optional[str] = None
    notes: Optional[str] = None
    valid_from: Optional[datetime] = Field(None, description="Defaults to now")
    valid_until: Optional[datetime] = Field(
        None, description="Required for temporary, forbidden for permanent"
    )
    max_uses: Optional[int] = Field(None, description="Required for multiple")


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=InvitationResponse
)
async def create_invitation(
    request: CreateInvitationRequest,
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
    publisher: IInvitationEventPublisher = Depends(get_event_publisher),
):
    """
    Create Invitation

    Issues a visitor invitation with a QR payload and a 6-character short code.

    Raises:
        - 400 Bad Request: invalid kind, visitor name, max_uses or validity window
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: role cannot invite, or unit is not yours
        - 404 Not Found: unit not found
        - 409 Conflict: short code could not be allocated
        - 503 Service Unavailable: STORE_UNAVAILABLE
    """
    command = CreateInvitationCommand(
        visitor_name=request.visitor_name,
        kind=request.kind,
        unit_id=parse_uuid(request.unit_id, "INVALID_UNIT_ID", "unit ID"),
        visitor_phone=request.visitor_phone,
        visitor_email=request.visitor_email,
        notes=request.notes,
        valid_from=request.valid_from,
        valid_until=request.valid_until,
        max_uses=request.max_uses,
    )

    use_case = CreateInvitationUseCase(
        uow,
        clock,
        qr_prefix=ApplicationConfig.QR_PREFIX,
        short_code_max_attempts=ApplicationConfig.SHORT_CODE_MAX_ATTEMPTS,
        publisher=publisher,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(
        UUID(membership.user_id), UUID(membership.organization_id), command
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=InvitationListResponse)
async def list_invitations(
    unit_id: Optional[str] = Query(None, description="Filter by unit"),
    status_filter: Optional[List[str]] = Query(
        None, alias="status", description="Derived status filter, repeatable"
    ),
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """
    List Invitations

    Residents get their own unit's invitations, administrators any unit.
    Newest first.
    """
    result = await ListInvitationsUseCase(uow, clock).execute(
        actor_id=UUID(membership.user_id),
        organization_id=UUID(membership.organization_id),
        unit_id=parse_uuid(unit_id, "INVALID_UNIT_ID", "unit ID"),
        statuses=status_filter,
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.get(
    "/lookup", status_code=status.HTTP_200_OK, response_model=LookupInvitationResponse
)
async def lookup_invitation(
    code: str = Query(..., description="QR payload or short code"),
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """
    Lookup Invitation by Code

    Shows the guard the invitation and what a scan would decide right now.
    Nothing is consumed or logged.

    Raises:
        - 403 Forbidden: role cannot validate access
        - 404 Not Found: unknown, malformed or foreign code
        - 503 Service Unavailable: STORE_UNAVAILABLE
    """
    use_case = LookupInvitationUseCase(
        uow,
        clock,
        ApplicationConfig.QR_PREFIX,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(
        code, UUID(membership.organization_id), UUID(membership.user_id)
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.get(
    "/{invitation_id}", status_code=status.HTTP_200_OK, response_model=InvitationResponse
)
async def get_invitation(
    invitation_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """Get Invitation"""
    invitation_uuid = parse_uuid(invitation_id, "INVALID_INVITATION_ID", "invitation ID")

    result = await GetInvitationUseCase(uow, clock).execute(
        invitation_uuid, current_user["user_id"]
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.post(
    "/{invitation_id}/cancel",
    status_code=status.HTTP_200_OK,
    response_model=CancelInvitationResponse,
)
async def cancel_invitation(
    invitation_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
    publisher: IInvitationEventPublisher = Depends(get_event_publisher),
):
    """
    Cancel Invitation

    Idempotent. Allowed for the creator or an administrator.

    Raises:
        - 403 Forbidden: neither creator nor administrator
        - 404 Not Found: invitation not found (or not in your organizations)
        - 503 Service Unavailable: STORE_UNAVAILABLE
    """
    invitation_uuid = parse_uuid(invitation_id, "INVALID_INVITATION_ID", "invitation ID")

    use_case = CancelInvitationUseCase(
        uow,
        clock,
        publisher,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(invitation_uuid, current_user["user_id"])

    if result.is_err():
        raise_error(result.error)

    return result.value
