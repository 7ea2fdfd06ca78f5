"""
AccessLog Entity

Immutable record of every access attempt at an organization's gate.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import AccessDirection, AccessMethod, AccessOutcome, DenialReason


class AccessLog(SQLModel, table=True):
    """
    AccessLog entity - append-only audit trail.

    Business Rules:
    - Immutable (never updated or deleted)
    - Written for granted and denied attempts alike
    - invitation_id is null for manual entries and for unknown codes
    - accessed_at comes from the server clock
    """

    __tablename__ = "access_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    unit_id: Optional[UUID] = Field(default=None, foreign_key="units.id", index=True)
    invitation_id: Optional[UUID] = Field(
        default=None, foreign_key="invitations.id", index=True
    )

    visitor_name: Optional[str] = Field(default=None, max_length=255)

    access_type: AccessDirection = Field(default=AccessDirection.entry)
    method: AccessMethod = Field(nullable=False)
    outcome: AccessOutcome = Field(default=AccessOutcome.granted)
    denial_reason: Optional[DenialReason] = Field(default=None)

    authorized_by: UUID = Field(foreign_key="users.id", nullable=False)
    notes: Optional[str] = Field(default=None, max_length=1000)

    accessed_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_access_log_org_accessed", "organization_id", "accessed_at"),
        Index("idx_access_log_unit_accessed", "unit_id", "accessed_at"),
    )
