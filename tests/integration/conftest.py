from datetime import timedelta
from uuid import UUID, uuid4

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.adapter.services.event_publisher import InMemoryInvitationEventPublisher
from gatepass.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from gatepass.api.utils.jwt import generate_jwt
from gatepass.depends import get_clock, get_event_publisher, get_unit_of_work
from gatepass.domain.entities import (
    Membership,
    MembershipRole,
    Organization,
    Unit,
    User,
)
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.builders import NOW
from tests.utils.clock import FixedClock


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return FixedClock(NOW)


@pytest_asyncio.fixture
def publisher():
    return InMemoryInvitationEventPublisher()


class Seed:
    """Ids and bearer headers of the seeded directory"""

    def __init__(self):
        self.organizations = {}
        self.units = {}
        self.users = {}
        self.memberships = {}

    def headers(self, user_key: str) -> dict:
        token = generate_jwt(self.users[user_key], expires_delta=timedelta(minutes=30))
        return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def seed(db_session, test_data):
    seed = Seed()

    for org in test_data.get_copy("organizations"):
        organization = Organization(id=UUID(org["id"]), name=org["name"], slug=org["slug"])
        db_session.add(organization)
        seed.organizations[org["slug"]] = organization.id

    for item in test_data.get_copy("units"):
        unit = Unit(
            id=UUID(item["id"]),
            organization_id=seed.organizations[item["organization"]],
            unit_number=item["unit_number"],
            building=item["building"],
        )
        db_session.add(unit)
        seed.units[item["unit_number"]] = unit.id

    for item in test_data.get_copy("users"):
        user = User(id=UUID(item["id"]), email=item["email"], full_name=item["full_name"])
        db_session.add(user)
        seed.users[item["key"]] = user.id

    await db_session.flush()

    for index, item in enumerate(test_data.get_copy("memberships")):
        membership = Membership(
            id=uuid4(),
            user_id=seed.users[item["user"]],
            organization_id=seed.organizations[item["organization"]],
            unit_id=seed.units[item["unit"]] if item["unit"] else None,
            role=MembershipRole(item["role"]),
            # Earlier entries are newer, so they win when nothing is recorded
            created_at=NOW - timedelta(days=index + 1),
        )
        db_session.add(membership)
        seed.memberships[(item["user"], item["organization"])] = membership.id

    await db_session.commit()
    return seed


@pytest_asyncio.fixture
async def client(db_session, clock, publisher):
    from gatepass.api.app import create_app
    from gatepass.config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_event_publisher] = lambda: publisher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
