from typing import Optional
from uuid import UUID

from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.domain.codes import PresentedCode
from gatepass.domain.entities import Invitation


async def find_invitation_by_code(
    uow: UnitOfWork, presented: Optional[PresentedCode], organization_id: UUID
) -> Optional[Invitation]:
    """
    Resolve a presented code within one organization.

    Unknown codes, malformed codes and codes of another organization all give
    None, so callers cannot tell them apart.
    """
    if presented is None:
        return None

    if presented.is_qr:
        invitation = await uow.invitations.get_by_qr_data(presented.value)
    else:
        invitation = await uow.invitations.get_by_short_code(
            organization_id, presented.value
        )

    if invitation is None or invitation.organization_id != organization_id:
        return None
    return invitation
