from uuid import uuid4

import pytest

from gatepass.app.use_cases.invitations import CancelInvitationUseCase
from gatepass.domain.entities import MembershipRole
from tests.utils.builders import NOW, make_invitation, make_membership


def _scope(mock_uow, organization, membership):
    mock_uow.memberships.get_by_user_and_organization.return_value = membership
    mock_uow.organizations.get_by_id.return_value = organization


@pytest.mark.asyncio
async def test_creator_cancels(mock_uow, clock, organization, unit, resident):
    # Arrange
    _scope(mock_uow, organization, resident)
    invitation = make_invitation(organization, unit, created_by=resident.user_id)
    mock_uow.invitations.get_by_id.return_value = invitation

    # Act
    result = await CancelInvitationUseCase(mock_uow, clock).execute(
        invitation.id, resident.user_id
    )

    # Assert
    assert result.is_ok()
    assert result.value.status == "cancelled"
    mock_uow.invitations.cancel.assert_called_once_with(invitation.id, resident.user_id, NOW)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cancel_twice_is_idempotent(mock_uow, clock, organization, unit, resident):
    _scope(mock_uow, organization, resident)
    invitation = make_invitation(
        organization, unit, created_by=resident.user_id, cancelled=True
    )
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await CancelInvitationUseCase(mock_uow, clock).execute(
        invitation.id, resident.user_id
    )

    assert result.is_ok()
    assert result.value.status == "cancelled"
    mock_uow.invitations.cancel.assert_not_called()


@pytest.mark.asyncio
async def test_admin_cancels_someone_elses(mock_uow, clock, organization, unit, admin):
    _scope(mock_uow, organization, admin)
    invitation = make_invitation(organization, unit)
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await CancelInvitationUseCase(mock_uow, clock).execute(invitation.id, admin.user_id)

    assert result.is_ok()


@pytest.mark.asyncio
async def test_other_resident_cannot_cancel(mock_uow, clock, organization, unit):
    neighbour = make_membership(organization, MembershipRole.resident, unit)
    _scope(mock_uow, organization, neighbour)
    invitation = make_invitation(organization, unit)
    mock_uow.invitations.get_by_id.return_value = invitation

    result = await CancelInvitationUseCase(mock_uow, clock).execute(
        invitation.id, neighbour.user_id
    )

    assert result.error.code == "INSUFFICIENT_ROLE"
    mock_uow.invitations.cancel.assert_not_called()


@pytest.mark.asyncio
async def test_outsider_gets_not_found(mock_uow, clock, organization, unit):
    mock_uow.invitations.get_by_id.return_value = make_invitation(organization, unit)
    mock_uow.memberships.get_by_user_and_organization.return_value = None

    result = await CancelInvitationUseCase(mock_uow, clock).execute(uuid4(), uuid4())

    assert result.error.code == "INVITATION_NOT_FOUND"


@pytest.mark.asyncio
async def test_cancel_publishes_event(mock_uow, clock, organization, unit, admin):
    _scope(mock_uow, organization, admin)
    invitation = make_invitation(organization, unit)
    mock_uow.invitations.get_by_id.return_value = invitation
    published = []

    class Recorder:
        async def publish(self, event):
            published.append(event)

    await CancelInvitationUseCase(mock_uow, clock, Recorder()).execute(
        invitation.id, admin.user_id
    )

    assert [e.change for e in published] == ["cancelled"]
