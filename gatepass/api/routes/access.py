"""
Access API Routes

Handles the gate: admission, exits, manual entries and the access log.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from gatepass.api.error import raise_error
from gatepass.api.utils.ids import parse_uuid
from gatepass.app.services.clock import IClock
from gatepass.app.services.event_publisher import IInvitationEventPublisher
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.app.use_cases.access import (
    AccessLogPageResponse,
    AccessLogResponse,
    ListAccessLogsUseCase,
    ManualEntryCommand,
    RecordManualEntryUseCase,
)
from gatepass.app.use_cases.invitations import (
    AdmissionResponse,
    AdmitInvitationUseCase,
    RecordExitUseCase,
)
from gatepass.app.use_cases.memberships import MembershipResponse
from gatepass.config import ApplicationConfig
from gatepass.depends import (
    get_active_membership,
    get_clock,
    get_event_publisher,
    get_unit_of_work,
)

router = APIRouter(prefix="/access", tags=["Access"])


class AdmitRequest(BaseModel):
    """Code presented at the gate"""

    code: str = Field(..., description="Scanned QR payload or typed short code")
    unit_id: Optional[str] = Field(
        None, description="Record the visit against this unit instead"
    )
    notes: Optional[str] = None


class ExitRequest(BaseModel):
    code: str = Field(..., description="Scanned QR payload or typed short code")
    notes: Optional[str] = None


class ManualEntryRequest(BaseModel):
    visitor_name: str = Field(..., description="Visitor full name (min 2 chars)")
    direction: str = Field("entry", description="entry or exit")
    unit_id: Optional[str] = None
    notes: Optional[str] = None


@router.post("/admit", status_code=status.HTTP_200_OK, response_model=AdmissionResponse)
async def admit(
    request: AdmitRequest,
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
    publisher: IInvitationEventPublisher = Depends(get_event_publisher),
):
    """
    Admit Visitor

    Validates the code and, if admitted, consumes one use and writes the
    access log entry in one transaction. Denials are logged too.

    Raises:
        - 403 Forbidden: ACCESS_DENIED with reason (cancelled, not_yet_valid,
                        expired, exhausted), or role cannot validate access
        - 404 Not Found: unknown, malformed or foreign code
        - 409 Conflict: ADMISSION_CONFLICT after repeated concurrent updates
        - 500 Internal Server Error: AUDIT_WRITE_FAILED
        - 503 Service Unavailable: STORE_UNAVAILABLE
    """
    use_case = AdmitInvitationUseCase(
        uow,
        clock,
        qr_prefix=ApplicationConfig.QR_PREFIX,
        publisher=publisher,
        max_attempts=ApplicationConfig.ADMIT_MAX_ATTEMPTS,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(
        code=request.code,
        organization_id=UUID(membership.organization_id),
        guard_id=UUID(membership.user_id),
        unit_override_id=parse_uuid(request.unit_id, "INVALID_UNIT_ID", "unit ID"),
        notes=request.notes,
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.post("/exit", status_code=status.HTTP_201_CREATED, response_model=AccessLogResponse)
async def record_exit(
    request: ExitRequest,
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """Record Visitor Exit"""
    use_case = RecordExitUseCase(
        uow,
        clock,
        qr_prefix=ApplicationConfig.QR_PREFIX,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(
        request.code,
        UUID(membership.organization_id),
        UUID(membership.user_id),
        notes=request.notes,
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.post(
    "/manual", status_code=status.HTTP_201_CREATED, response_model=AccessLogResponse
)
async def record_manual_entry(
    request: ManualEntryRequest,
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: IClock = Depends(get_clock),
):
    """
    Record Manual Entry

    Logs a visitor who came without an invitation.
    """
    command = ManualEntryCommand(
        visitor_name=request.visitor_name,
        direction=request.direction,
        unit_id=parse_uuid(request.unit_id, "INVALID_UNIT_ID", "unit ID"),
        notes=request.notes,
    )

    use_case = RecordManualEntryUseCase(
        uow,
        clock,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(
        UUID(membership.user_id), UUID(membership.organization_id), command
    )

    if result.is_err():
        raise_error(result.error)

    return result.value


@router.get("/logs", status_code=status.HTTP_200_OK, response_model=AccessLogPageResponse)
async def list_access_logs(
    limit: int = Query(50, ge=1, le=100, description="Maximum number of entries"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
    membership: MembershipResponse = Depends(get_active_membership),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get Access Log

    Query Parameters:
        - limit: Maximum number of entries to return (1-100, default 50)
        - cursor: Pagination cursor for fetching next page

    Returns:
        - logs: entries ordered by newest first
        - next_cursor: Cursor for next page (null if no more entries)
    """
    result = await ListAccessLogsUseCase(uow).execute(
        UUID(membership.user_id),
        UUID(membership.organization_id),
        limit=limit,
        cursor=cursor,
    )

    if result.is_err():
        raise_error(result.error)

    return result.value
