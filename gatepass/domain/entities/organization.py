"""
Organization Entity

A tenant: residential complex, office building, campus.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import OrganizationStatus

if TYPE_CHECKING:
    from .membership import Membership
    from .unit import Unit


class Organization(SQLModel, table=True):
    """
    Organization entity - isolated tenant.

    Business Rules:
    - Invitations, memberships and access logs never cross organizations
    - Suspension blocks all operations
    """

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=100, unique=True, index=True)

    status: OrganizationStatus = Field(default=OrganizationStatus.active)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="organization")
    units: list["Unit"] = Relationship(back_populates="organization")

    __table_args__ = (Index("idx_organization_status", "status"),)
