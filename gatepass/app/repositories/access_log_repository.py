from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from gatepass.domain.entities import AccessLog


class IAccessLogRepository(ABC):
    """AccessLog repository interface - application layer"""

    @abstractmethod
    async def append(self, access_log: AccessLog) -> AccessLog:
        """Append a new access log entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_organization_paginated(
        self,
        organization_id: UUID,
        unit_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[AccessLog], Optional[str]]:
        """
        Get access logs for an organization (optionally one unit) with
        cursor-based pagination.

        Returns:
            Tuple of (entries list, next_cursor)
            - entries: ordered by accessed_at DESC
            - next_cursor: Cursor for next page, None if no more entries
        """
        pass
