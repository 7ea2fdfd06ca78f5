from .admit_invitation_use_case import AdmitInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase
from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import (
    AdmissionResponse,
    CancelInvitationResponse,
    CreateInvitationCommand,
    InvitationListResponse,
    InvitationResponse,
    LookupInvitationResponse,
)
from .get_invitation_use_case import GetInvitationUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .lookup_invitation_use_case import LookupInvitationUseCase
from .record_exit_use_case import RecordExitUseCase

__all__ = [
    "AdmitInvitationUseCase",
    "CancelInvitationUseCase",
    "CreateInvitationUseCase",
    "GetInvitationUseCase",
    "ListInvitationsUseCase",
    "LookupInvitationUseCase",
    "RecordExitUseCase",
    "AdmissionResponse",
    "CancelInvitationResponse",
    "CreateInvitationCommand",
    "InvitationListResponse",
    "InvitationResponse",
    "LookupInvitationResponse",
]
