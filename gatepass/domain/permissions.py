"""
Role gates.

Pure functions of a membership role. The client shows these for convenience;
the server re-checks them before every privileged operation.
"""

from typing import Optional

from .entities import Membership, MembershipRole

SCAN_ROLES = (MembershipRole.guard, MembershipRole.admin, MembershipRole.super_admin)
INVITE_ROLES = (MembershipRole.resident, MembershipRole.admin, MembershipRole.super_admin)
MANAGE_ROLES = (MembershipRole.admin, MembershipRole.super_admin)


def can_scan_access(role: MembershipRole) -> bool:
    return role in SCAN_ROLES


def can_create_invitations(role: MembershipRole) -> bool:
    return role in INVITE_ROLES


def can_manage_users(role: MembershipRole) -> bool:
    return role in MANAGE_ROLES


def is_unit_bound(membership: Membership) -> bool:
    """Residents act only on their own unit; staff act on the whole organization"""
    return membership.role == MembershipRole.resident


def permissions_for(membership: Optional[Membership]) -> dict:
    """Flags for the client; all false for a missing or inactive membership"""
    if membership is None or not membership.is_active:
        return {
            "can_scan_access": False,
            "can_create_invitations": False,
            "can_manage_users": False,
        }
    return {
        "can_scan_access": can_scan_access(membership.role),
        "can_create_invitations": can_create_invitations(membership.role),
        "can_manage_users": can_manage_users(membership.role),
    }
