from sqlmodel.ext.asyncio.session import AsyncSession

from gatepass.adapter.repositories.access_log_repository import AccessLogRepository
from gatepass.adapter.repositories.invitation_repository import InvitationRepository
from gatepass.adapter.repositories.membership_repository import MembershipRepository
from gatepass.adapter.repositories.organization_repository import OrganizationRepository
from gatepass.adapter.repositories.unit_repository import UnitRepository
from gatepass.adapter.repositories.user_repository import UserRepository
from gatepass.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.organizations = OrganizationRepository(self.session)
        self.units = UnitRepository(self.session)
        self.users = UserRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.invitations = InvitationRepository(self.session)
        self.access_logs = AccessLogRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed is abandoned
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
