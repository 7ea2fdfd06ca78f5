"""
Create Invitation Use Case

Handles residents issuing visitor invitations for their unit.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.clock import IClock
from gatepass.app.services.code_generator import CodeGenerator
from gatepass.app.services.event_publisher import (
    IInvitationEventPublisher,
    InvitationChangedEvent,
)
from gatepass.app.services.retry import StoreUnavailableError, with_store_retry
from gatepass.app.services.tenant_scope import require_membership
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.admission import to_naive_utc
from gatepass.domain.entities import Invitation, InvitationKind, InvitationStatus
from gatepass.domain.permissions import can_create_invitations, is_unit_bound

from .dtos import CreateInvitationCommand, InvitationResponse

logger = logging.getLogger(__name__)

MIN_VISITOR_NAME_LENGTH = 2


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CreateInvitationUseCase:
    """
    Use case for creating a visitor invitation.

    Business Rules:
    - Visitor name is required, at least 2 characters after trimming
    - Phone, email and notes are passed through (trimmed, empty becomes null)
    - single: max_uses forced to 1
    - multiple: caller supplies max_uses >= 1
    - temporary: valid_until required; max_uses optional (count bound on top)
    - permanent: no valid_until; max_uses optional
    - valid_from defaults to server now; valid_until must not precede it and
      must still be in the future
    - Caller needs an active membership allowed to invite; residents only for
      their own unit, staff for any unit of the organization
    - Starts with current_uses=0, status=active
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: IClock,
        qr_prefix: str,
        short_code_max_attempts: int = 5,
        publisher: Optional[IInvitationEventPublisher] = None,
        store_retry_attempts: int = 3,
        store_retry_base_delay: float = 0.2,
    ):
        self.uow = uow
        self.clock = clock
        self.qr_prefix = qr_prefix
        self.short_code_max_attempts = short_code_max_attempts
        self.publisher = publisher
        self.store_retry_attempts = store_retry_attempts
        self.store_retry_base_delay = store_retry_base_delay

    def _validate_bounds(
        self, kind: InvitationKind, command: CreateInvitationCommand, now: datetime
    ) -> Result[Tuple[datetime, Optional[datetime], Optional[int]]]:
        valid_from = to_naive_utc(command.valid_from) if command.valid_from else now
        valid_until = to_naive_utc(command.valid_until) if command.valid_until else None

        if command.max_uses is not None and command.max_uses < 1:
            return Return.err(
                Error("INVALID_MAX_USES", "max_uses must be a positive integer")
            )

        if kind == InvitationKind.single:
            max_uses = 1
        elif kind == InvitationKind.multiple:
            if command.max_uses is None:
                return Return.err(
                    Error(
                        "INVALID_MAX_USES",
                        "Multiple-use invitations need max_uses",
                    )
                )
            max_uses = command.max_uses
        else:
            max_uses = command.max_uses

        if kind == InvitationKind.temporary and valid_until is None:
            return Return.err(
                Error(
                    "INVALID_VALIDITY_WINDOW",
                    "Temporary invitations need an end date",
                )
            )
        if kind == InvitationKind.permanent and valid_until is not None:
            return Return.err(
                Error(
                    "INVALID_VALIDITY_WINDOW",
                    "Permanent invitations have no end date",
                )
            )

        if valid_until is not None:
            if valid_until < valid_from:
                return Return.err(
                    Error(
                        "INVALID_VALIDITY_WINDOW",
                        "valid_until must not be before valid_from",
                    )
                )
            if valid_until <= now:
                return Return.err(
                    Error("INVALID_VALIDITY_WINDOW", "valid_until is already in the past")
                )

        return Return.ok((valid_from, valid_until, max_uses))

    async def execute(
        self, actor_id: UUID, organization_id: UUID, command: CreateInvitationCommand
    ) -> Result[InvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            actor_id: Resident (or admin) creating the invitation
            organization_id: Organization of the caller's active membership
            command: Invitation parameters

        Returns:
            Result with InvitationResponse DTO, or Error
        """
        try:
            kind = InvitationKind(command.kind)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_KIND",
                    f"Invalid kind: {command.kind}. Must be one of: "
                    "single, multiple, temporary, permanent",
                )
            )

        visitor_name = (command.visitor_name or "").strip()
        if len(visitor_name) < MIN_VISITOR_NAME_LENGTH:
            return Return.err(
                Error(
                    "INVALID_VISITOR_NAME",
                    "Visitor name must be at least 2 characters long",
                )
            )

        now = self.clock.now()
        bounds = self._validate_bounds(kind, command, now)
        if bounds.is_err():
            return bounds
        valid_from, valid_until, max_uses = bounds.value

        try:
            stored = await with_store_retry(
                lambda: self._store(
                    actor_id, organization_id, command, kind, visitor_name,
                    valid_from, valid_until, max_uses, now,
                ),
                attempts=self.store_retry_attempts,
                base_delay=self.store_retry_base_delay,
            )
        except StoreUnavailableError:
            return Return.err(
                Error("STORE_UNAVAILABLE", "Invitation store is unavailable, try again")
            )
        if stored.is_err():
            return stored
        invitation = stored.value
        unit_id = invitation.unit_id

        logger.info(
            f"Invitation {invitation.id} created for unit {unit_id} "
            f"({kind.value}, max_uses={max_uses})"
        )

        if self.publisher is not None:
            await self.publisher.publish(
                InvitationChangedEvent(
                    invitation_id=invitation.id,
                    organization_id=organization_id,
                    unit_id=unit_id,
                    change="created",
                    status=InvitationStatus.active.value,
                    current_uses=0,
                    max_uses=max_uses,
                    occurred_at=now,
                )
            )

        return Return.ok(InvitationResponse.from_invitation(invitation, InvitationStatus.active))

    async def _store(
        self,
        actor_id: UUID,
        organization_id: UUID,
        command: CreateInvitationCommand,
        kind: InvitationKind,
        visitor_name: str,
        valid_from: datetime,
        valid_until: Optional[datetime],
        max_uses: Optional[int],
        now: datetime,
    ) -> Result[Invitation]:
        async with self.uow:
            scope = await require_membership(
                self.uow,
                actor_id,
                organization_id,
                gate=can_create_invitations,
                denied_message="Your role cannot create invitations",
            )
            if scope.is_err():
                return scope
            membership = scope.value

            unit_id = command.unit_id or membership.unit_id
            if unit_id is None:
                return Return.err(
                    Error("UNIT_REQUIRED", "A unit is required for the invitation")
                )

            unit = await self.uow.units.get_by_id(unit_id)
            if unit is None or unit.organization_id != organization_id:
                return Return.err(Error("UNIT_NOT_FOUND", "Unit not found"))

            if is_unit_bound(membership) and unit_id != membership.unit_id:
                return Return.err(
                    Error(
                        "UNIT_NOT_ALLOWED",
                        "Residents can only invite visitors to their own unit",
                    )
                )

            codes = await CodeGenerator(
                self.uow, self.qr_prefix, self.short_code_max_attempts
            ).generate(organization_id)
            if codes.is_err():
                return codes

            invitation = Invitation(
                id=codes.value.invitation_id,
                organization_id=organization_id,
                unit_id=unit_id,
                created_by=actor_id,
                visitor_name=visitor_name,
                visitor_phone=_clean(command.visitor_phone),
                visitor_email=_clean(command.visitor_email),
                notes=_clean(command.notes),
                kind=kind,
                valid_from=valid_from,
                valid_until=valid_until,
                max_uses=max_uses,
                current_uses=0,
                qr_data=codes.value.qr_data,
                short_code=codes.value.short_code,
                status=InvitationStatus.active,
                created_at=now,
                updated_at=now,
            )

            try:
                await self.uow.invitations.create(invitation)
                await self.uow.commit()
            except IntegrityError:
                # Lost a short code race against a concurrent create
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "SHORT_CODE_CONFLICT",
                        "Could not allocate a unique short code, please retry",
                    )
                )

        return Return.ok(invitation)
