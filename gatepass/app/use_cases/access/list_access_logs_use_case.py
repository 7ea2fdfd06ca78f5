"""
List Access Logs Use Case

Retrieves the access log of an organization with pagination.
"""

from typing import Optional
from uuid import UUID

from gatepass.libs.result import Result, Return
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.permissions import is_unit_bound

from .dtos import AccessLogPageResponse, AccessLogResponse

MAX_PAGE_SIZE = 100


class ListAccessLogsUseCase:
    """
    Use case for reading access history.

    Business Rules:
    - Guards and admins see the whole organization
    - Residents see only their own unit's entries
    - Newest first, cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_id: UUID,
        organization_id: UUID,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[AccessLogPageResponse]:
        """
        Execute list access logs use case.

        Args:
            actor_id: Caller
            organization_id: Organization of the caller's active membership
            limit: Page size, clamped to 1..100
            cursor: Opaque cursor returned by the previous page

        Returns:
            Result with one page of logs and next_cursor
        """
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        async with self.uow:
            scope = await require_membership(self.uow, actor_id, organization_id)
            if scope.is_err():
                return scope
            membership = scope.value

            unit_id = None
            if is_unit_bound(membership):
                if membership.unit_id is None:
                    return Return.ok(AccessLogPageResponse(logs=[], next_cursor=None))
                unit_id = membership.unit_id

            logs, next_cursor = await self.uow.access_logs.get_by_organization_paginated(
                organization_id, unit_id=unit_id, limit=limit, cursor=cursor
            )

            return Return.ok(
                AccessLogPageResponse(
                    logs=[AccessLogResponse.from_access_log(log) for log in logs],
                    next_cursor=next_cursor,
                )
            )
