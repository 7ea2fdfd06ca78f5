"""
Record Manual Entry Use Case

Handles a guard logging a visitor who arrived without an invitation
(deliveries, unannounced guests).
"""

import logging
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.access_log_writer import (
    AccessEvent,
    AccessLogWriter,
    AuditWriteError,
)
from gatepass.app.services.clock import IClock
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.entities import AccessDirection, AccessMethod
from gatepass.domain.permissions import can_scan_access

from .dtos import AccessLogResponse, ManualEntryCommand

logger = logging.getLogger(__name__)


class RecordManualEntryUseCase:
    """
    Use case for recording an access without invitation.

    Business Rules:
    - Caller must be an active guard, admin or super_admin
    - Visitor name is required, at least 2 characters after trimming
    - Direction is entry or exit
    - Unit is optional but must belong to the organization when given
    - Logged with method=manual_entry and outcome=granted
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(
        self, guard_id: UUID, organization_id: UUID, command: ManualEntryCommand
    ) -> Result[AccessLogResponse]:
        visitor_name = (command.visitor_name or "").strip()
        if len(visitor_name) < 2:
            return Return.err(
                Error(
                    "INVALID_VISITOR_NAME",
                    "Visitor name must be at least 2 characters long",
                )
            )

        try:
            direction = AccessDirection(command.direction)
        except ValueError:
            return Return.err(
                Error("INVALID_DIRECTION", "Direction must be entry or exit")
            )

        notes = command.notes.strip() if command.notes else None

        try:
            return await with_store_retry(
                lambda: self._run(
                    guard_id, organization_id, visitor_name, direction,
                    command.unit_id, notes or None,
                ),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Access store is unavailable, try again")
            )

    async def _run(self, guard_id, organization_id, visitor_name, direction, unit_id, notes):
        async with self.uow:
            scope = await require_membership(
                self.uow,
                guard_id,
                organization_id,
                gate=can_scan_access,
                denied_message="Your role cannot record access",
            )
            if scope.is_err():
                return scope

            if unit_id is not None:
                unit = await self.uow.units.get_by_id(unit_id)
                if unit is None or unit.organization_id != organization_id:
                    return Return.err(Error("UNIT_NOT_FOUND", "Unit not found"))

            try:
                entry = await AccessLogWriter(self.uow).record(
                    AccessEvent(
                        organization_id=organization_id,
                        authorized_by=guard_id,
                        method=AccessMethod.manual_entry,
                        accessed_at=self.clock.now(),
                        access_type=direction,
                        unit_id=unit_id,
                        visitor_name=visitor_name,
                        notes=notes,
                    )
                )
            except AuditWriteError:
                await self.uow.rollback()
                return Return.err(
                    Error("AUDIT_WRITE_FAILED", "Access could not be recorded")
                )

            await self.uow.commit()

        logger.info(
            f"Manual {direction.value} recorded for '{visitor_name}' "
            f"in organization {organization_id}"
        )
        return Return.ok(AccessLogResponse.from_access_log(entry))
