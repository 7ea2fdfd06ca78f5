from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.adapter.services.clock import SystemClock
from gatepass.adapter.services.event_publisher import InMemoryInvitationEventPublisher
from gatepass.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from gatepass.api.error import raise_error
from gatepass.api.utils.jwt import verify_jwt
from gatepass.app.services.clock import IClock
from gatepass.app.services.unit_of_work import UnitOfWork
from gatepass.app.use_cases.memberships import (
    MembershipResponse,
    ResolveActiveMembershipUseCase,
)
from gatepass.config import ApplicationConfig

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()

system_clock = SystemClock()
event_publisher = InMemoryInvitationEventPublisher()


async def init_db():
    """Create missing tables (development and single-node deployments)"""
    import gatepass.domain.entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> IClock:
    return system_clock


def get_event_publisher() -> InMemoryInvitationEventPublisher:
    return event_publisher


def decode_user_id(token: str) -> UUID:
    """
    Verify a bearer token and return its user id.

    Raises:
        HTTPException: 401 if token is invalid, expired or carries no user id
    """
    payload = verify_jwt(token)
    try:
        return UUID(payload["user_id"])
    except (TypeError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Dict with the caller's user_id (UUID)

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    return {"user_id": decode_user_id(credentials.credentials)}


async def get_active_membership(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> MembershipResponse:
    """
    Dependency resolving the organization the caller acts in.

    The organization is never taken from the request: it is the caller's
    active membership as recorded server-side.
    """
    use_case = ResolveActiveMembershipUseCase(
        uow,
        store_retry_attempts=ApplicationConfig.STORE_RETRY_ATTEMPTS,
        store_retry_base_delay=ApplicationConfig.STORE_RETRY_BASE_DELAY,
    )
    result = await use_case.execute(current_user["user_id"])
    if result.is_err():
        raise_error(result.error)
    return result.value
