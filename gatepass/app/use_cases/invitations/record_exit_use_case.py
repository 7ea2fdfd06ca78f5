"""
Record Exit Use Case

Logs a visitor leaving through the gate. Exits consume no use and are allowed
even after the invitation expired or was cancelled, since the visitor is
already inside.
"""

import logging
from typing import Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.access_log_writer import (
    AccessEvent,
    AccessLogWriter,
    AuditWriteError,
)
from gatepass.app.services.clock import IClock
from gatepass.app.services.invitation_finder import find_invitation_by_code
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.codes import parse_code
from gatepass.domain.entities import AccessDirection
from gatepass.domain.permissions import can_scan_access

from gatepass.app.use_cases.access.dtos import AccessLogResponse

logger = logging.getLogger(__name__)


class RecordExitUseCase:
    """
    Business Rules:
    - Caller must be allowed to scan access in the organization
    - The invitation must have been admitted at least once (NO_PRIOR_ENTRY)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        qr_prefix: str,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.qr_prefix = qr_prefix
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(
        self,
        code: str,
        organization_id: UUID,
        guard_id: UUID,
        notes: Optional[str] = None,
    ) -> Result[AccessLogResponse]:
        try:
            return await with_store_retry(
                lambda: self._run(code, organization_id, guard_id, notes),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Access store is unavailable, try again")
            )

    async def _run(
        self, code: str, organization_id: UUID, guard_id: UUID, notes: Optional[str]
    ) -> Result[AccessLogResponse]:
        presented = parse_code(code, self.qr_prefix)

        async with self.uow:
            scope = await require_membership(
                self.uow,
                guard_id,
                organization_id,
                gate=can_scan_access,
                denied_message="Your role cannot validate access",
            )
            if scope.is_err():
                return scope

            invitation = await find_invitation_by_code(
                self.uow, presented, organization_id
            )
            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            if invitation.current_uses == 0:
                return Return.err(
                    Error("NO_PRIOR_ENTRY", "Visitor has not entered on this invitation")
                )

            try:
                entry = await AccessLogWriter(self.uow).record(
                    AccessEvent(
                        organization_id=organization_id,
                        authorized_by=guard_id,
                        method=presented.method,
                        accessed_at=self.clock.now(),
                        access_type=AccessDirection.exit,
                        invitation_id=invitation.id,
                        unit_id=invitation.unit_id,
                        visitor_name=invitation.visitor_name,
                        notes=notes,
                    )
                )
            except AuditWriteError:
                await self.uow.rollback()
                return Return.err(
                    Error("AUDIT_WRITE_FAILED", "Exit could not be recorded")
                )

            await self.uow.commit()

        logger.info(f"Exit recorded for invitation {invitation.id} by guard {guard_id}")
        return Return.ok(AccessLogResponse.from_access_log(entry))
