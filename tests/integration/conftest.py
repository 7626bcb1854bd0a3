import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from partner_iam.adapter.repositories.tenant_repository import TenantRepository
from partner_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from partner_iam.api.utils.jwt import generate_jwt
from partner_iam.app.services.access_cache import SessionAccessCache
from partner_iam.app.services.allowlist import SuperadminAllowlist
from partner_iam.app.services.provisioning_locks import ProvisioningLockRegistry
from partner_iam.depends import (
    get_access_cache,
    get_allowlist,
    get_provisioning_locks,
    get_unit_of_work,
)
from partner_iam.domain.entities import Identity, Membership, Tenant

SUPERADMIN_EMAIL = "root@portal.com"
DEFAULT_PASSWORD = "SecurePass123!"


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
def access_cache():
    return SessionAccessCache(ttl_seconds=300)


@pytest_asyncio.fixture
async def client(db_session, access_cache):
    from partner_iam.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    locks = ProvisioningLockRegistry()
    allowlist = SuperadminAllowlist(emails=[SUPERADMIN_EMAIL])

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_access_cache] = lambda: access_cache
    app.dependency_overrides[get_provisioning_locks] = lambda: locks
    app.dependency_overrides[get_allowlist] = lambda: allowlist

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def seed(db_session, test_data):
    """Insert tenants, identities and memberships, return their ids by key"""

    async def _seed(*identity_keys):
        ids = {}
        tenants = TenantRepository(db_session)
        for tenant_data in test_data.get_copy("tenants"):
            await tenants.create(Tenant(**tenant_data))

        password_hash = bcrypt.hashpw(DEFAULT_PASSWORD.encode(), bcrypt.gensalt(4)).decode()
        for key in identity_keys:
            data = test_data.identity(key)
            identity = Identity(
                email=data["email"],
                full_name=data["full_name"],
                password_hash=password_hash,
                email_confirmed=True,
            )
            db_session.add(identity)
            await db_session.flush()
            membership_data = data.get("membership")
            if membership_data is not None:
                membership = Membership(
                    identity_id=identity.id,
                    tenant_id=membership_data.get("tenant_id"),
                    role=membership_data["role"],
                    disabled=membership_data.get("disabled", False),
                    email=identity.email,
                    full_name=identity.full_name,
                )
                db_session.add(membership)
                await db_session.flush()
                ids[f"{key}_membership"] = membership.id
            ids[key] = identity.id
        await db_session.commit()
        return ids

    return _seed


@pytest_asyncio.fixture
def auth_headers():
    def _headers(identity_id, session_id="test-session"):
        return {"Authorization": f"Bearer {generate_jwt(identity_id, session_id)}"}

    return _headers


@pytest_asyncio.fixture
async def pooled_client(engine, access_cache):
    """Client where every request opens its own session, as in production"""
    from partner_iam.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    locks = ProvisioningLockRegistry()
    allowlist = SuperadminAllowlist(emails=[SUPERADMIN_EMAIL])

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_access_cache] = lambda: access_cache
    app.dependency_overrides[get_provisioning_locks] = lambda: locks
    app.dependency_overrides[get_allowlist] = lambda: allowlist

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
