from .add_member_use_case import AddMemberUseCase
from .deactivate_member_use_case import DeactivateMemberUseCase
from .dtos import (
    AddMemberCommand,
    DeactivateMemberResponse,
    MembershipListResponse,
    MembershipResponse,
)
from .list_memberships_use_case import ListMembershipsUseCase
from .resolve_active_membership_use_case import ResolveActiveMembershipUseCase
from .switch_active_membership_use_case import SwitchActiveMembershipUseCase

__all__ = [
    "AddMemberUseCase",
    "DeactivateMemberUseCase",
    "ListMembershipsUseCase",
    "ResolveActiveMembershipUseCase",
    "SwitchActiveMembershipUseCase",
    "AddMemberCommand",
    "DeactivateMemberResponse",
    "MembershipListResponse",
    "MembershipResponse",
]
