from abc import ABC, abstractmethod

from partner_iam.app.repositories.activity_log_repository import IActivityLogRepository
from partner_iam.app.repositories.deliverable_repository import IDeliverableRepository
from partner_iam.app.repositories.identity_repository import IIdentityRepository
from partner_iam.app.repositories.membership_repository import IMembershipRepository
from partner_iam.app.repositories.recovery_token_repository import IRecoveryTokenRepository
from partner_iam.app.repositories.tenant_repository import ITenantRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    identities: IIdentityRepository
    tenants: ITenantRepository
    memberships: IMembershipRepository
    activity_log: IActivityLogRepository
    recovery_tokens: IRecoveryTokenRepository
    deliverables: IDeliverableRepository

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
