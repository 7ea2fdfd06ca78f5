from datetime import timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from gatepass.app.use_cases.invitations import (
    CreateInvitationCommand,
    CreateInvitationUseCase,
)
from gatepass.domain.entities import InvitationStatus, Unit
from tests.utils.builders import NOW


@pytest.fixture
def use_case(mock_uow, clock):
    return CreateInvitationUseCase(mock_uow, clock, qr_prefix="GATEPASS")


@pytest.fixture
def resident_scope(mock_uow, organization, unit, resident):
    mock_uow.memberships.get_by_user_and_organization.return_value = resident
    mock_uow.organizations.get_by_id.return_value = organization
    mock_uow.units.get_by_id.return_value = unit
    return resident


@pytest.mark.asyncio
async def test_create_single_use_invitation(use_case, mock_uow, organization, unit, resident_scope):
    # Arrange
    command = CreateInvitationCommand(
        visitor_name="  Ana Torres  ", visitor_phone=" 555-0101 ", visitor_email="  "
    )

    # Act
    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    # Assert
    assert result.is_ok()
    invitation = result.value
    assert invitation.visitor_name == "Ana Torres"
    assert invitation.visitor_phone == "555-0101"
    assert invitation.visitor_email is None
    assert invitation.kind == "single"
    assert invitation.max_uses == 1
    assert invitation.current_uses == 0
    assert invitation.status == "active"
    assert invitation.unit_id == str(unit.id)
    assert invitation.valid_from == NOW.isoformat() + "Z"
    assert len(invitation.short_code) == 6
    assert invitation.qr_data.startswith(f"GATEPASS:{invitation.id}:")

    mock_uow.invitations.create.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_single_use_ignores_requested_max_uses(use_case, organization, resident_scope):
    command = CreateInvitationCommand(visitor_name="Ana Torres", kind="single", max_uses=9)

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.is_ok()
    assert result.value.max_uses == 1


@pytest.mark.asyncio
async def test_multiple_requires_max_uses(use_case, organization, resident_scope):
    command = CreateInvitationCommand(visitor_name="Ana Torres", kind="multiple")

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.is_err()
    assert result.error.code == "INVALID_MAX_USES"


@pytest.mark.asyncio
async def test_multiple_with_max_uses(use_case, organization, resident_scope):
    command = CreateInvitationCommand(visitor_name="Ana Torres", kind="multiple", max_uses=3)

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.is_ok()
    assert result.value.max_uses == 3
    assert result.value.remaining_uses == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("max_uses", [0, -2])
async def test_non_positive_max_uses_rejected(use_case, organization, resident_scope, max_uses):
    command = CreateInvitationCommand(
        visitor_name="Ana Torres", kind="multiple", max_uses=max_uses
    )

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_MAX_USES"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", " ", "A", "  B  "])
async def test_visitor_name_too_short(use_case, mock_uow, organization, resident_scope, name):
    command = CreateInvitationCommand(visitor_name=name)

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.is_err()
    assert result.error.code == "INVALID_VISITOR_NAME"
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_kind(use_case, organization, resident_scope):
    command = CreateInvitationCommand(visitor_name="Ana Torres", kind="forever")

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_KIND"


@pytest.mark.asyncio
async def test_temporary_requires_end(use_case, organization, resident_scope):
    command = CreateInvitationCommand(visitor_name="Ana Torres", kind="temporary")

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_VALIDITY_WINDOW"


@pytest.mark.asyncio
async def test_temporary_normalizes_aware_datetimes(use_case, organization, resident_scope):
    end = (NOW + timedelta(days=2)).replace(tzinfo=timezone.utc)
    command = CreateInvitationCommand(
        visitor_name="Ana Torres", kind="temporary", valid_until=end
    )

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.is_ok()
    assert result.value.valid_until == (NOW + timedelta(days=2)).isoformat() + "Z"
    assert result.value.max_uses is None


@pytest.mark.asyncio
async def test_permanent_rejects_end(use_case, organization, resident_scope):
    command = CreateInvitationCommand(
        visitor_name="Ana Torres", kind="permanent", valid_until=NOW + timedelta(days=1)
    )

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_VALIDITY_WINDOW"


@pytest.mark.asyncio
async def test_end_before_start_rejected(use_case, organization, resident_scope):
    command = CreateInvitationCommand(
        visitor_name="Ana Torres",
        kind="temporary",
        valid_from=NOW + timedelta(days=3),
        valid_until=NOW + timedelta(days=2),
    )

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_VALIDITY_WINDOW"


@pytest.mark.asyncio
async def test_end_in_past_rejected(use_case, organization, resident_scope):
    command = CreateInvitationCommand(
        visitor_name="Ana Torres",
        kind="temporary",
        valid_from=NOW - timedelta(days=3),
        valid_until=NOW - timedelta(days=2),
    )

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "INVALID_VALIDITY_WINDOW"


@pytest.mark.asyncio
async def test_resident_cannot_invite_for_other_unit(
    use_case, mock_uow, organization, resident_scope
):
    other_unit = Unit(id=uuid4(), organization_id=organization.id, unit_number="202")
    mock_uow.units.get_by_id.return_value = other_unit
    command = CreateInvitationCommand(visitor_name="Ana Torres", unit_id=other_unit.id)

    result = await use_case.execute(resident_scope.user_id, organization.id, command)

    assert result.error.code == "UNIT_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_unit_of_another_organization_not_found(
    use_case, mock_uow, organization, admin
):
    mock_uow.memberships.get_by_user_and_organization.return_value = admin
    mock_uow.organizations.get_by_id.return_value = organization
    mock_uow.units.get_by_id.return_value = Unit(
        id=uuid4(), organization_id=uuid4(), unit_number="1"
    )
    command = CreateInvitationCommand(visitor_name="Ana Torres", unit_id=uuid4())

    result = await use_case.execute(admin.user_id, organization.id, command)

    assert result.error.code == "UNIT_NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_without_unit_must_name_one(use_case, mock_uow, organization, admin):
    mock_uow.memberships.get_by_user_and_organization.return_value = admin
    mock_uow.organizations.get_by_id.return_value = organization

    result = await use_case.execute(
        admin.user_id, organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.error.code == "UNIT_REQUIRED"


@pytest.mark.asyncio
async def test_guard_cannot_create(use_case, mock_uow, organization, guard):
    mock_uow.memberships.get_by_user_and_organization.return_value = guard
    mock_uow.organizations.get_by_id.return_value = organization

    result = await use_case.execute(
        guard.user_id, organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.error.code == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_non_member_cannot_create(use_case, mock_uow, organization):
    mock_uow.memberships.get_by_user_and_organization.return_value = None

    result = await use_case.execute(
        uuid4(), organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.error.code == "NOT_A_MEMBER"


@pytest.mark.asyncio
async def test_short_code_race_on_insert(use_case, mock_uow, organization, resident_scope):
    mock_uow.invitations.create.side_effect = IntegrityError(
        "INSERT", {}, Exception("UNIQUE constraint failed")
    )

    result = await use_case.execute(
        resident_scope.user_id, organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.error.code == "SHORT_CODE_CONFLICT"
    mock_uow.rollback.assert_called_once()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_created_event_is_published(mock_uow, clock, organization, resident_scope):
    published = []

    class Recorder:
        async def publish(self, event):
            published.append(event)

    use_case = CreateInvitationUseCase(
        mock_uow, clock, qr_prefix="GATEPASS", publisher=Recorder()
    )
    result = await use_case.execute(
        resident_scope.user_id, organization.id, CreateInvitationCommand(visitor_name="Ana Torres")
    )

    assert result.is_ok()
    assert len(published) == 1
    assert published[0].change == "created"
    assert published[0].status == InvitationStatus.active.value
    assert str(published[0].invitation_id) == result.value.id
