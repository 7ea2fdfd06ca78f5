"""
Unit Entity

An apartment, house or office inside an organization.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

if TYPE_CHECKING:
    from .organization import Organization


class Unit(SQLModel, table=True):
    __tablename__ = "units"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    unit_number: str = Field(max_length=50)
    building: Optional[str] = Field(default=None, max_length=100)

    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    organization: "Organization" = Relationship(back_populates="units")

    __table_args__ = (
        Index(
            "idx_unit_org_number_building",
            "organization_id",
            "unit_number",
            "building",
            unique=True,
        ),
    )
