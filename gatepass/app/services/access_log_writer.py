"""
Access Log Writer

Appends the audit record of an access attempt. The audit trail is a
compliance requirement, so a failed write is never swallowed: it is logged at
CRITICAL and raised as AuditWriteError for the caller to roll back on.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import (
    AccessDirection,
    AccessLog,
    AccessMethod,
    AccessOutcome,
    DenialReason,
)

logger = logging.getLogger(__name__)


class AuditWriteError(Exception):
    """The access log entry could not be written"""


@dataclass(frozen=True)
class AccessEvent:
    organization_id: UUID
    authorized_by: UUID
    method: AccessMethod
    accessed_at: datetime
    access_type: AccessDirection = AccessDirection.entry
    outcome: AccessOutcome = AccessOutcome.granted
    denial_reason: Optional[DenialReason] = None
    invitation_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    visitor_name: Optional[str] = None
    notes: Optional[str] = None


class AccessLogWriter:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(self, event: AccessEvent) -> AccessLog:
        """Append one entry inside the caller's open unit of work"""
        entry = AccessLog(
            organization_id=event.organization_id,
            unit_id=event.unit_id,
            invitation_id=event.invitation_id,
            visitor_name=event.visitor_name,
            access_type=event.access_type,
            method=event.method,
            outcome=event.outcome,
            denial_reason=event.denial_reason,
            authorized_by=event.authorized_by,
            notes=event.notes,
            accessed_at=event.accessed_at,
        )
        try:
            return await self.uow.access_logs.append(entry)
        except OperationalError:
            # Transient, left to the store retry
            raise
        except SQLAlchemyError as exc:
            logger.critical(
                f"Access log write failed for organization {event.organization_id} "
                f"invitation {event.invitation_id} outcome {event.outcome.value}: {exc}"
            )
            raise AuditWriteError(str(exc)) from exc
