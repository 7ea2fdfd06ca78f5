from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from gatepass.domain.entities import (
    MembershipRole,
    Organization,
    OrganizationStatus,
    Unit,
)
from tests.utils.builders import NOW, make_membership
from tests.utils.clock import FixedClock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.organizations = MagicMock()
    uow.organizations.get_by_id = AsyncMock()

    uow.units = MagicMock()
    uow.units.get_by_id = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.update = AsyncMock()

    uow.memberships = MagicMock()
    uow.memberships.get_by_id = AsyncMock()
    uow.memberships.get_by_user_and_organization = AsyncMock()
    uow.memberships.get_by_user_id = AsyncMock(return_value=[])
    uow.memberships.create = AsyncMock(side_effect=lambda m: m)
    uow.memberships.update = AsyncMock(side_effect=lambda m: m)

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock()
    uow.invitations.get_by_qr_data = AsyncMock()
    uow.invitations.get_by_short_code = AsyncMock()
    uow.invitations.short_code_exists = AsyncMock(return_value=False)
    uow.invitations.list_by_unit = AsyncMock(return_value=[])
    uow.invitations.list_by_organization = AsyncMock(return_value=[])
    uow.invitations.create = AsyncMock(side_effect=lambda i: i)
    uow.invitations.conditional_update = AsyncMock(return_value=True)
    uow.invitations.cancel = AsyncMock(return_value=True)

    uow.access_logs = MagicMock()
    uow.access_logs.append = AsyncMock(side_effect=lambda log: log)
    uow.access_logs.get_by_organization_paginated = AsyncMock(return_value=([], None))

    return uow


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def organization():
    return Organization(
        id=uuid4(), name="Residencial Norte", slug="norte", status=OrganizationStatus.active
    )


@pytest.fixture
def unit(organization):
    return Unit(id=uuid4(), organization_id=organization.id, unit_number="101", building="A")


@pytest.fixture
def resident(organization, unit):
    return make_membership(organization, MembershipRole.resident, unit)


@pytest.fixture
def guard(organization):
    return make_membership(organization, MembershipRole.guard)


@pytest.fixture
def admin(organization):
    return make_membership(organization, MembershipRole.admin)
