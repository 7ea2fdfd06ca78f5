from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.app.repositories.unit_repository import IUnitRepository
from gatepass.domain.entities import Unit


class UnitRepository(IUnitRepository):
    """Unit repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, unit_id: UUID) -> Optional[Unit]:
        """Get unit by ID"""
        stmt = select(Unit).where(Unit.id == unit_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()
