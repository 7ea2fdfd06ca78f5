from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from gatepass.domain.entities import Unit


class IUnitRepository(ABC):
    """Unit repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, unit_id: UUID) -> Optional[Unit]:
        """Get unit by ID"""
        pass
