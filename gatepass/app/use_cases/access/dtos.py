"""
Access Use Case DTOs
"""

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from gatepass.domain.entities import AccessLog


class ManualEntryCommand(BaseModel):
    """Guard-logged access for a visitor without an invitation"""

    visitor_name: str
    direction: str = "entry"
    unit_id: Optional[UUID] = None
    notes: Optional[str] = None


class AccessLogResponse(BaseModel):
    id: str
    organization_id: str
    unit_id: Optional[str]
    invitation_id: Optional[str]
    visitor_name: Optional[str]
    access_type: str
    method: str
    outcome: str
    denial_reason: Optional[str]
    authorized_by: str
    notes: Optional[str]
    accessed_at: str

    @classmethod
    def from_access_log(cls, entry: AccessLog) -> "AccessLogResponse":
        return cls(
            id=str(entry.id),
            organization_id=str(entry.organization_id),
            unit_id=str(entry.unit_id) if entry.unit_id else None,
            invitation_id=str(entry.invitation_id) if entry.invitation_id else None,
            visitor_name=entry.visitor_name,
            access_type=entry.access_type.value,
            method=entry.method.value,
            outcome=entry.outcome.value,
            denial_reason=entry.denial_reason.value if entry.denial_reason else None,
            authorized_by=str(entry.authorized_by),
            notes=entry.notes,
            accessed_at=entry.accessed_at.isoformat() + "Z",
        )


class AccessLogPageResponse(BaseModel):
    logs: List[AccessLogResponse]
    next_cursor: Optional[str]
