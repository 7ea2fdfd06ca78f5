from abc import ABC, abstractmethod

from gatepass.app.repositories.access_log_repository import IAccessLogRepository
from gatepass.app.repositories.invitation_repository import IInvitationRepository
from gatepass.app.repositories.membership_repository import IMembershipRepository
from gatepass.app.repositories.organization_repository import IOrganizationRepository
from gatepass.app.repositories.unit_repository import IUnitRepository
from gatepass.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    organizations: IOrganizationRepository
    units: IUnitRepository
    users: IUserRepository
    memberships: IMembershipRepository
    invitations: IInvitationRepository
    access_logs: IAccessLogRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
