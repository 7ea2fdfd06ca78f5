from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from gatepass.app.use_cases.invitations import (
    CancelInvitationUseCase,
    CreateInvitationCommand,
    CreateInvitationUseCase,
    LookupInvitationUseCase,
)
from gatepass.app.use_cases.memberships import ResolveActiveMembershipUseCase
from gatepass.domain.entities import InvitationStatus
from tests.utils.builders import make_invitation


def _down():
    return OperationalError("SELECT", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_create_reports_store_unavailable(mock_uow, clock, organization):
    mock_uow.memberships.get_by_user_and_organization.side_effect = _down()

    use_case = CreateInvitationUseCase(
        mock_uow,
        clock,
        qr_prefix="GATEPASS",
        store_retry_attempts=3,
        store_retry_base_delay=0,
    )
    result = await use_case.execute(
        uuid4(), organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.error.code == "STORE_UNAVAILABLE"
    assert mock_uow.memberships.get_by_user_and_organization.call_count == 3
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_create_recovers_from_one_transient_failure(
    mock_uow, clock, organization, unit, resident
):
    mock_uow.memberships.get_by_user_and_organization.side_effect = [_down(), resident]
    mock_uow.organizations.get_by_id.return_value = organization
    mock_uow.units.get_by_id.return_value = unit

    use_case = CreateInvitationUseCase(
        mock_uow, clock, qr_prefix="GATEPASS", store_retry_base_delay=0
    )
    result = await use_case.execute(
        resident.user_id, organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.is_ok()
    assert result.value.status == InvitationStatus.active.value
    mock_uow.invitations.create.assert_called_once()


@pytest.mark.asyncio
async def test_lookup_reports_store_unavailable(mock_uow, clock, organization, guard):
    mock_uow.memberships.get_by_user_and_organization.side_effect = _down()

    use_case = LookupInvitationUseCase(
        mock_uow,
        clock,
        "GATEPASS",
        store_retry_attempts=2,
        store_retry_base_delay=0,
    )
    result = await use_case.execute("ABC234", organization.id, guard.user_id)

    assert result.error.code == "STORE_UNAVAILABLE"
    assert mock_uow.memberships.get_by_user_and_organization.call_count == 2


@pytest.mark.asyncio
async def test_cancel_reports_store_unavailable(mock_uow, clock, organization, unit):
    invitation = make_invitation(organization, unit)
    mock_uow.invitations.get_by_id.side_effect = _down()

    use_case = CancelInvitationUseCase(
        mock_uow, clock, store_retry_attempts=3, store_retry_base_delay=0
    )
    result = await use_case.execute(invitation.id, invitation.created_by)

    assert result.error.code == "STORE_UNAVAILABLE"
    assert mock_uow.invitations.get_by_id.call_count == 3
    mock_uow.invitations.cancel.assert_not_called()


@pytest.mark.asyncio
async def test_resolve_active_membership_reports_store_unavailable(mock_uow):
    mock_uow.users.get_by_id.side_effect = _down()

    use_case = ResolveActiveMembershipUseCase(
        mock_uow, store_retry_attempts=3, store_retry_base_delay=0
    )
    result = await use_case.execute(uuid4())

    assert result.error.code == "STORE_UNAVAILABLE"
    assert mock_uow.users.get_by_id.call_count == 3
