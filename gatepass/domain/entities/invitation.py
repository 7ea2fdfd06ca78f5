"""
Invitation Entity

A resident-issued, time and usage bounded grant of entry for a named visitor.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import InvitationKind, InvitationStatus


class Invitation(SQLModel, table=True):
    """
    Invitation entity.

    Business Rules:
    - Created by a resident (or admin) for a unit of their organization
    - Ground truth is (cancelled, valid_from, valid_until, current_uses,
      max_uses); status is a projection refreshed on every mutation
    - current_uses only grows, and only through a conditional update
    - max_uses=None means the invitation is bounded by time only
    - Never deleted; cancelled invitations stay for the audit trail
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    unit_id: UUID = Field(foreign_key="units.id", nullable=False, index=True)
    created_by: UUID = Field(foreign_key="users.id", nullable=False)

    # Visitor
    visitor_name: str = Field(max_length=255)
    visitor_phone: Optional[str] = Field(default=None, max_length=50)
    visitor_email: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=1000)

    kind: InvitationKind = Field(default=InvitationKind.single)

    # Validity window
    valid_from: datetime = Field(sa_column=Column(DateTime, nullable=False))
    valid_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Usage accounting
    max_uses: Optional[int] = Field(default=1)
    current_uses: int = Field(default=0)

    # Identifiers
    qr_data: str = Field(unique=True, index=True, max_length=128)
    short_code: str = Field(max_length=6)

    status: InvitationStatus = Field(default=InvitationStatus.active)
    cancelled: bool = Field(default=False)
    cancelled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    cancelled_by: Optional[UUID] = Field(default=None)

    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_invitation_org_short_code", "organization_id", "short_code", unique=True),
        Index("idx_invitation_unit_created", "unit_id", "created_at"),
        Index("idx_invitation_status", "status"),
        Index("idx_invitation_valid_until", "valid_until"),
    )

    @property
    def remaining_uses(self) -> Optional[int]:
        if self.max_uses is None:
            return None
        return max(self.max_uses - self.current_uses, 0)
