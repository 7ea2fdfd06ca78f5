"""
Membership Entity

Links a User to an Organization with a role and an optional unit.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import MembershipRole, MembershipStatus

if TYPE_CHECKING:
    from .organization import Organization
    from .user import User


class Membership(SQLModel, table=True):
    """
    Membership entity - links User to Organization with a role.

    Business Rules:
    - One user can be member of multiple organizations
    - (user_id, organization_id) must be unique
    - Removal deactivates the row (status=inactive); rows are never deleted
    - Inactive memberships grant nothing
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    unit_id: Optional[UUID] = Field(default=None, foreign_key="units.id")

    role: MembershipRole = Field(nullable=False)
    status: MembershipStatus = Field(default=MembershipStatus.active)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    deactivated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Relationships
    user: "User" = Relationship(back_populates="memberships")
    organization: "Organization" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_user_org", "user_id", "organization_id", unique=True),
        Index("idx_membership_status", "status"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.active
