from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from gatepass.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_qr_data(self, qr_data: str) -> Optional[Invitation]:
        """Get invitation by its full QR payload"""
        pass

    @abstractmethod
    async def get_by_short_code(
        self, organization_id: UUID, short_code: str
    ) -> Optional[Invitation]:
        """Get invitation by short code within an organization"""
        pass

    @abstractmethod
    async def short_code_exists(self, organization_id: UUID, short_code: str) -> bool:
        """Check whether a short code is already taken in an organization"""
        pass

    @abstractmethod
    async def list_by_unit(self, unit_id: UUID) -> List[Invitation]:
        """Get all invitations for a unit, newest first"""
        pass

    @abstractmethod
    async def list_by_organization(self, organization_id: UUID) -> List[Invitation]:
        """Get all invitations for an organization, newest first"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def conditional_update(
        self, invitation_id: UUID, expected_uses: int, **values: Any
    ) -> bool:
        """
        Apply ``values`` only if the invitation is not cancelled and still has
        ``current_uses == expected_uses``.

        Returns:
            True if exactly one row was updated, False if the condition no
            longer held (another writer got there first)
        """
        pass

    @abstractmethod
    async def cancel(self, invitation_id: UUID, actor_id: UUID, now: datetime) -> bool:
        """
        Set the cancelled flag if it is not set yet.

        Returns:
            True if this call cancelled the invitation, False if it already was
        """
        pass
