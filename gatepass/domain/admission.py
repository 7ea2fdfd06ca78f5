"""
Admission Engine

Pure decision logic for invitations. Nothing here touches storage or reads the
wall clock: callers pass the record and the server's "now" and get back a
verdict and the state the record should move to.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .entities import DenialReason, Invitation, InvitationKind, InvitationStatus


@dataclass(frozen=True)
class Decision:
    """Verdict for one admission attempt"""

    status: InvitationStatus
    admit: bool
    reason: Optional[DenialReason] = None


@dataclass(frozen=True)
class AdmissionOutcome:
    """Counters and status after one granted admission"""

    current_uses: int
    status: InvitationStatus
    used_at: Optional[datetime]


def to_naive_utc(dt: datetime) -> datetime:
    """Normalize to the naive UTC representation stored in the DB"""
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def decide(invitation: Invitation, now: datetime) -> Decision:
    """
    Decide whether the invitation grants entry at ``now``.

    Order matters: cancellation dominates, then the start of the window, then
    its end, then the usage quota.
    """
    now = to_naive_utc(now)

    if invitation.cancelled:
        return Decision(InvitationStatus.cancelled, False, DenialReason.cancelled)

    # Not started yet: still active, it becomes usable later
    if now < to_naive_utc(invitation.valid_from):
        return Decision(InvitationStatus.active, False, DenialReason.not_yet_valid)

    if invitation.valid_until is not None and now > to_naive_utc(invitation.valid_until):
        return Decision(InvitationStatus.expired, False, DenialReason.expired)

    if invitation.max_uses is not None and invitation.current_uses >= invitation.max_uses:
        return Decision(InvitationStatus.used, False, DenialReason.exhausted)

    return Decision(InvitationStatus.active, True)


def derive_status(invitation: Invitation, now: datetime) -> InvitationStatus:
    """Read-only projection of the invitation's status at ``now``"""
    return decide(invitation, now).status


def admit(invitation: Invitation, now: datetime) -> AdmissionOutcome:
    """
    Compute the state after one granted admission.

    Callers must have obtained an admitting ``decide`` verdict for the same
    record and ``now``; this function does not re-check it.
    """
    now = to_naive_utc(now)
    new_uses = invitation.current_uses + 1

    exhausted = invitation.kind == InvitationKind.single or (
        invitation.max_uses is not None and new_uses >= invitation.max_uses
    )
    if exhausted:
        return AdmissionOutcome(new_uses, InvitationStatus.used, invitation.used_at or now)

    return AdmissionOutcome(new_uses, InvitationStatus.active, invitation.used_at)
