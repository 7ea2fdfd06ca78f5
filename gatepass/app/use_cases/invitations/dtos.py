"""
Invitation Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the invitation domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from gatepass.domain.entities import Invitation, InvitationStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() + "Z" if value is not None else None


# ============================================================================
# Command DTOs
# ============================================================================


class CreateInvitationCommand(BaseModel):
    """
    Create invitation command - represents a resident's intent

    Created by API layer after request parsing. unit_id defaults to the
    caller's own unit.
    """

    visitor_name: str
    kind: str = "single"
    unit_id: Optional[UUID] = None
    visitor_phone: Optional[str] = None
    visitor_email: Optional[str] = None
    notes: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_uses: Optional[int] = None


# ============================================================================
# Response DTOs
# ============================================================================


class InvitationResponse(BaseModel):
    """Invitation as shown to residents and guards"""

    id: str
    organization_id: str
    unit_id: str
    created_by: str
    visitor_name: str
    visitor_phone: Optional[str]
    visitor_email: Optional[str]
    notes: Optional[str]
    kind: str
    status: str
    valid_from: str
    valid_until: Optional[str]
    max_uses: Optional[int]
    current_uses: int
    remaining_uses: Optional[int]
    qr_data: str
    short_code: str
    used_at: Optional[str]
    created_at: str

    @classmethod
    def from_invitation(
        cls, invitation: Invitation, status: InvitationStatus
    ) -> "InvitationResponse":
        """Build from an entity; ``status`` is the derived status, not the column"""
        return cls(
            id=str(invitation.id),
            organization_id=str(invitation.organization_id),
            unit_id=str(invitation.unit_id),
            created_by=str(invitation.created_by),
            visitor_name=invitation.visitor_name,
            visitor_phone=invitation.visitor_phone,
            visitor_email=invitation.visitor_email,
            notes=invitation.notes,
            kind=invitation.kind.value,
            status=status.value,
            valid_from=_iso(invitation.valid_from),
            valid_until=_iso(invitation.valid_until),
            max_uses=invitation.max_uses,
            current_uses=invitation.current_uses,
            remaining_uses=invitation.remaining_uses,
            qr_data=invitation.qr_data,
            short_code=invitation.short_code,
            used_at=_iso(invitation.used_at),
            created_at=_iso(invitation.created_at),
        )


class InvitationListResponse(BaseModel):
    invitations: List[InvitationResponse]


class LookupInvitationResponse(BaseModel):
    """Dry-run result of presenting a code: what admission would decide now"""

    invitation: InvitationResponse
    admissible: bool
    reason: Optional[str]


class AdmissionResponse(BaseModel):
    """Response for a granted admission"""

    invitation_id: str
    access_log_id: str
    visitor_name: str
    unit_id: str
    method: str
    status: str
    current_uses: int
    max_uses: Optional[int]
    remaining_uses: Optional[int]
    accessed_at: str


class CancelInvitationResponse(BaseModel):
    """Response for cancel invitation use case"""

    invitation_id: str
    status: str
