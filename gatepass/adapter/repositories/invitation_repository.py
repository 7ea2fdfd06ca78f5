from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.app.repositories.invitation_repository import IInvitationRepository
from gatepass.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """
    Invitation repository implementation using SQLModel.

    Reads always overwrite the session's cached copy: admission decides on
    what the store holds now, not on what this session saw earlier.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = (
            select(Invitation)
            .where(Invitation.id == invitation_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_qr_data(self, qr_data: str) -> Optional[Invitation]:
        """Get invitation by QR payload"""
        stmt = (
            select(Invitation)
            .where(Invitation.qr_data == qr_data)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_short_code(
        self, organization_id: UUID, short_code: str
    ) -> Optional[Invitation]:
        """Get invitation by short code within an organization"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.organization_id == organization_id,
                Invitation.short_code == short_code,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def short_code_exists(self, organization_id: UUID, short_code: str) -> bool:
        """Check if a short code is taken in an organization"""
        stmt = select(Invitation.id).where(
            Invitation.organization_id == organization_id,
            Invitation.short_code == short_code,
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def list_by_unit(self, unit_id: UUID) -> List[Invitation]:
        """Get all invitations of a unit, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.unit_id == unit_id)
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_by_organization(self, organization_id: UUID) -> List[Invitation]:
        """Get all invitations of an organization, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.organization_id == organization_id)
            .order_by(Invitation.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def conditional_update(
        self, invitation_id: UUID, expected_uses: int, **values: Any
    ) -> bool:
        """Compare-and-set on current_uses; the WHERE clause is the lock"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.current_uses == expected_uses,
                Invitation.cancelled == False,  # noqa: E712
            )
            .values(**values)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def cancel(self, invitation_id: UUID, actor_id: UUID, now: datetime) -> bool:
        """Set the cancelled flag once; later calls match no row"""
        stmt = (
            update(Invitation)
            .where(Invitation.id == invitation_id, Invitation.cancelled == False)  # noqa: E712
            .values(
                cancelled=True,
                status=InvitationStatus.cancelled,
                cancelled_at=now,
                cancelled_by=actor_id,
                updated_at=now,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
