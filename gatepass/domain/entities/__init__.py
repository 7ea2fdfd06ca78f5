"""
Gatepass Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AccessDirection,
    AccessMethod,
    AccessOutcome,
    DenialReason,
    InvitationKind,
    InvitationStatus,
    MembershipRole,
    MembershipStatus,
    OrganizationStatus,
)

# Export all entities
from .organization import Organization
from .unit import Unit
from .user import User
from .membership import Membership
from .invitation import Invitation
from .access_log import AccessLog

__all__ = [
    # Enums
    "AccessDirection",
    "AccessMethod",
    "AccessOutcome",
    "DenialReason",
    "InvitationKind",
    "InvitationStatus",
    "MembershipRole",
    "MembershipStatus",
    "OrganizationStatus",
    # Entities
    "Organization",
    "Unit",
    "User",
    "Membership",
    "Invitation",
    "AccessLog",
]
