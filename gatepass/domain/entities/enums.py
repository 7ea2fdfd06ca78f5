"""
Gatepass Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class OrganizationStatus(str, Enum):
    """Organization (tenant) status"""

    active = "active"
    suspended = "suspended"


class MembershipRole(str, Enum):
    """User role within an organization"""

    resident = "resident"
    admin = "admin"
    guard = "guard"
    super_admin = "super_admin"


class MembershipStatus(str, Enum):
    """Membership status"""

    active = "active"
    inactive = "inactive"


class InvitationKind(str, Enum):
    """How an invitation's validity is bounded"""

    single = "single"
    multiple = "multiple"
    temporary = "temporary"
    permanent = "permanent"


class InvitationStatus(str, Enum):
    """Invitation status (persisted projection of the derived state)"""

    active = "active"
    used = "used"
    expired = "expired"
    cancelled = "cancelled"


class DenialReason(str, Enum):
    """Why an admission attempt was refused"""

    cancelled = "cancelled"
    not_yet_valid = "not_yet_valid"
    expired = "expired"
    exhausted = "exhausted"
    not_found = "not_found"


class AccessDirection(str, Enum):
    """Direction of an access log entry"""

    entry = "entry"
    exit = "exit"


class AccessMethod(str, Enum):
    """How the visitor was identified at the gate"""

    qr_scan = "qr_scan"
    manual_code = "manual_code"
    manual_entry = "manual_entry"


class AccessOutcome(str, Enum):
    """Result of an access attempt"""

    granted = "granted"
    denied = "denied"
