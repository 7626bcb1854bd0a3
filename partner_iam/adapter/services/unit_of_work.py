from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.adapter.repositories.activity_log_repository import ActivityLogRepository
from partner_iam.adapter.repositories.deliverable_repository import DeliverableRepository
from partner_iam.adapter.repositories.identity_repository import IdentityRepository
from partner_iam.adapter.repositories.membership_repository import MembershipRepository
from partner_iam.adapter.repositories.recovery_token_repository import RecoveryTokenRepository
from partner_iam.adapter.repositories.tenant_repository import TenantRepository
from partner_iam.app.services.tenant_filter_guard import TenantFilterGuard
from partner_iam.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, guard: Optional[TenantFilterGuard] = None):
        self.session = session
        self.guard = guard or TenantFilterGuard()

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.identities = IdentityRepository(self.session)
        self.tenants = TenantRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.activity_log = ActivityLogRepository(self.session, self.guard)
        self.recovery_tokens = RecoveryTokenRepository(self.session)
        self.deliverables = DeliverableRepository(self.session, self.guard)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        # Rollback expires every loaded instance, so only roll back on error;
        # uncommitted work is discarded when the request session closes
        if exc_type is not None:
            await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
