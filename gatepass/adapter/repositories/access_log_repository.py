import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlmodel import and_, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.app.repositories.access_log_repository import IAccessLogRepository
from gatepass.domain.entities import AccessLog


class AccessLogRepository(IAccessLogRepository):
    """AccessLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, access_log: AccessLog) -> AccessLog:
        """Append an access log entry (immutable)"""
        self.session.add(access_log)
        await self.session.flush()
        await self.session.refresh(access_log)
        return access_log

    async def get_by_organization_paginated(
        self,
        organization_id: UUID,
        unit_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[AccessLog], Optional[str]]:
        """
        Get access logs for an organization with cursor-based pagination.

        Cursor format: base64-encoded "<ISO accessed_at>|<id>" of the last
        entry of the previous page. The id breaks ties between entries logged
        in the same instant.
        """
        stmt = select(AccessLog).where(AccessLog.organization_id == organization_id)
        if unit_id is not None:
            stmt = stmt.where(AccessLog.unit_id == unit_id)

        if cursor:
            try:
                decoded = base64.b64decode(cursor).decode("utf-8")
                timestamp_str, id_str = decoded.split("|", 1)
                cursor_timestamp = datetime.fromisoformat(timestamp_str)
                cursor_id = UUID(id_str)
                stmt = stmt.where(
                    or_(
                        AccessLog.accessed_at < cursor_timestamp,
                        and_(
                            AccessLog.accessed_at == cursor_timestamp,
                            AccessLog.id < cursor_id,
                        ),
                    )
                )
            except (ValueError, TypeError):
                # Invalid cursor, ignore and return from beginning
                pass

        stmt = stmt.order_by(AccessLog.accessed_at.desc(), AccessLog.id.desc()).limit(
            limit + 1
        )

        result = await self.session.exec(stmt)
        logs = list(result.all())

        has_more = len(logs) > limit
        if has_more:
            logs = logs[:limit]

        next_cursor = None
        if has_more and logs:
            last = logs[-1]
            raw = f"{last.accessed_at.isoformat()}|{last.id}"
            next_cursor = base64.b64encode(raw.encode("utf-8")).decode("utf-8")

        return logs, next_cursor
