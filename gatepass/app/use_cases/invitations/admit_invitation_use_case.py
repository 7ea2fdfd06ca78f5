"""
Admit Invitation Use Case

The gate check-in: a guard presents a scanned or typed code and the visitor is
either admitted (one use consumed, audit entry written) or denied with a
reason. Consuming the use and writing the audit entry commit together or not
at all.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.access_log_writer import (
    AccessEvent,
    AccessLogWriter,
    AuditWriteError,
)
from gatepass.app.services.clock import IClock
from gatepass.app.services.event_publisher import (
    IInvitationEventPublisher,
    InvitationChangedEvent,
)
from gatepass.app.services.invitation_finder import find_invitation_by_code
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain import admission
from gatepass.domain.codes import PresentedCode, parse_code
from gatepass.domain.entities import (
    AccessMethod,
    AccessOutcome,
    DenialReason,
    Invitation,
)
from gatepass.domain.permissions import can_scan_access

from .dtos import AdmissionResponse

logger = logging.getLogger(__name__)


class AdmitInvitationUseCase:
    """
    Use case for admitting a visitor on an invitation code.

    Business Rules:
    - Caller must be an active guard, admin or super_admin of the organization
    - Code is resolved only inside the caller's organization; unknown,
      malformed and foreign codes are all INVITATION_NOT_FOUND
    - Verdict comes from the admission engine evaluated at server time
    - The use is consumed with a conditional update keyed on the
      current_uses value just read; a concurrent winner makes the update
      miss and this caller re-reads and decides again
    - Every attempt, granted or denied, is written to the access log
    - If the audit entry for a granted admission cannot be written, the
      consumed use is rolled back and AUDIT_WRITE_FAILED is returned
    - Transient store failures are retried, then STORE_UNAVAILABLE; the
      gate never fails open
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        qr_prefix: str,
        publisher: Optional[IInvitationEventPublisher] = None,
        max_attempts: int = 3,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.qr_prefix = qr_prefix
        self.publisher = publisher
        self.max_attempts = max_attempts
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    async def execute(
        self,
        code: str,
        organization_id: UUID,
        guard_id: UUID,
        unit_override_id: Optional[UUID] = None,
        notes: Optional[str] = None,
    ) -> Result[AdmissionResponse]:
        """
        Execute admit invitation use case.

        Args:
            code: QR payload or short code as presented
            organization_id: Organization of the guard's active membership
            guard_id: Acting guard
            unit_override_id: Unit to record on the log entry instead of the
                invitation's own unit
            notes: Free text stored on the log entry

        Returns:
            Result with AdmissionResponse, or Error (ACCESS_DENIED carries the
            denial reason)
        """
        presented = parse_code(code, self.qr_prefix)

        try:
            result = await with_store_retry(
                lambda: self._run(
                    presented, organization_id, guard_id, unit_override_id, notes
                ),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Access store is unavailable, try again")
            )

        if result.is_ok() and self.publisher is not None:
            await self._publish(result.value, organization_id)

        return result

    async def _run(
        self,
        presented: Optional[PresentedCode],
        organization_id: UUID,
        guard_id: UUID,
        unit_override_id: Optional[UUID],
        notes: Optional[str],
    ) -> Result[AdmissionResponse]:
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

            if unit_override_id is not None:
                unit = await self.uow.units.get_by_id(unit_override_id)
                if unit is None or unit.organization_id != organization_id:
                    return Return.err(Error("UNIT_NOT_FOUND", "Unit not found"))

            method = presented.method if presented else AccessMethod.manual_code

            for attempt in range(1, self.max_attempts + 1):
                now = self.clock.now()
                invitation = await find_invitation_by_code(
                    self.uow, presented, organization_id
                )

                if invitation is None:
                    await self._record_denial(
                        organization_id, guard_id, method, now,
                        DenialReason.not_found, None, unit_override_id, notes,
                    )
                    return Return.err(
                        Error("INVITATION_NOT_FOUND", "Invitation not found")
                    )

                # Rollback expires the ORM instance, only locals are read after it
                invitation_id = invitation.id
                decision = admission.decide(invitation, now)
                if not decision.admit:
                    if invitation.status != decision.status:
                        # Refresh the stored projection, uses unchanged
                        await self.uow.invitations.conditional_update(
                            invitation.id,
                            invitation.current_uses,
                            status=decision.status,
                            updated_at=now,
                        )
                    await self._record_denial(
                        organization_id, guard_id, method, now,
                        decision.reason, invitation, unit_override_id, notes,
                    )
                    logger.info(
                        f"Access denied for invitation {invitation_id}: "
                        f"{decision.reason.value}"
                    )
                    return Return.err(
                        Error(
                            "ACCESS_DENIED",
                            _denial_message(decision.reason),
                            reason=decision.reason.value,
                        )
                    )

                expected_uses = invitation.current_uses
                outcome = admission.admit(invitation, now)
                won = await self.uow.invitations.conditional_update(
                    invitation.id,
                    expected_uses,
                    current_uses=outcome.current_uses,
                    status=outcome.status,
                    used_at=outcome.used_at,
                    updated_at=now,
                )
                if not won:
                    # Another gate consumed a use since the read
                    await self.uow.rollback()
                    logger.info(
                        f"Admission race on invitation {invitation_id} "
                        f"(attempt {attempt}/{self.max_attempts}), re-reading"
                    )
                    continue

                try:
                    entry = await AccessLogWriter(self.uow).record(
                        AccessEvent(
                            organization_id=organization_id,
                            authorized_by=guard_id,
                            method=method,
                            accessed_at=now,
                            invitation_id=invitation.id,
                            unit_id=unit_override_id or invitation.unit_id,
                            visitor_name=invitation.visitor_name,
                            notes=notes,
                        )
                    )
                except AuditWriteError:
                    await self.uow.rollback()
                    return Return.err(
                        Error(
                            "AUDIT_WRITE_FAILED",
                            "Access could not be recorded, visitor not admitted",
                        )
                    )

                await self.uow.commit()

                logger.info(
                    f"Invitation {invitation.id} admitted by guard {guard_id} "
                    f"({outcome.current_uses}/{invitation.max_uses or 'unbounded'})"
                )

                remaining = None
                if invitation.max_uses is not None:
                    remaining = max(invitation.max_uses - outcome.current_uses, 0)

                return Return.ok(
                    AdmissionResponse(
                        invitation_id=str(invitation.id),
                        access_log_id=str(entry.id),
                        visitor_name=invitation.visitor_name,
                        unit_id=str(invitation.unit_id),
                        method=method.value,
                        status=outcome.status.value,
                        current_uses=outcome.current_uses,
                        max_uses=invitation.max_uses,
                        remaining_uses=remaining,
                        accessed_at=now.isoformat() + "Z",
                    )
                )

            logger.warning(
                f"Admission gave up after {self.max_attempts} conflicting attempts"
            )
            return Return.err(
                Error(
                    "ADMISSION_CONFLICT",
                    "Invitation is being used at another gate, try again",
                )
            )

    async def _record_denial(
        self,
        organization_id: UUID,
        guard_id: UUID,
        method: AccessMethod,
        now: datetime,
        reason: DenialReason,
        invitation: Optional[Invitation],
        unit_override_id: Optional[UUID],
        notes: Optional[str],
    ) -> None:
        """Write the denied attempt; a failed write never turns a denial into a grant"""
        try:
            await AccessLogWriter(self.uow).record(
                AccessEvent(
                    organization_id=organization_id,
                    authorized_by=guard_id,
                    method=method,
                    accessed_at=now,
                    outcome=AccessOutcome.denied,
                    denial_reason=reason,
                    invitation_id=invitation.id if invitation else None,
                    unit_id=unit_override_id
                    or (invitation.unit_id if invitation else None),
                    visitor_name=invitation.visitor_name if invitation else None,
                    notes=notes,
                )
            )
            await self.uow.commit()
        except AuditWriteError:
            await self.uow.rollback()

    async def _publish(self, admitted: AdmissionResponse, organization_id: UUID) -> None:
        await self.publisher.publish(
            InvitationChangedEvent(
                invitation_id=UUID(admitted.invitation_id),
                organization_id=organization_id,
                unit_id=UUID(admitted.unit_id),
                change="admitted",
                status=admitted.status,
                current_uses=admitted.current_uses,
                max_uses=admitted.max_uses,
                occurred_at=self.clock.now(),
            )
        )


def _denial_message(reason: DenialReason) -> str:
    return {
        DenialReason.cancelled: "Invitation has been cancelled",
        DenialReason.not_yet_valid: "Invitation is not valid yet",
        DenialReason.expired: "Invitation has expired",
        DenialReason.exhausted: "Invitation has no uses left",
    }.get(reason, "Access denied")
