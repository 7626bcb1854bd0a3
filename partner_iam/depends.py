from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from partner_iam.adapter.services.local_identity_provider import LocalIdentityProvider
from partner_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from partner_iam.api.error import ClientError
from partner_iam.api.utils.jwt import verify_jwt
from partner_iam.app.services.access_cache import SessionAccessCache
from partner_iam.app.services.allowlist import SuperadminAllowlist
from partner_iam.app.services.identity_provider import IIdentityProvider
from partner_iam.app.services.provisioning_locks import ProvisioningLockRegistry
from partner_iam.app.services.role_resolver import ResolutionContext, RoleResolver
from partner_iam.app.services.tenant_filter_guard import TenantFilterGuard
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess, RoleOverride
from partner_iam.domain.entities import AccessRole, Identity
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

# Process-wide collaborators. The access cache is keyed per session.
tenant_guard = TenantFilterGuard()
access_cache = SessionAccessCache(ttl_seconds=ApplicationConfig.ROLE_CACHE_TTL_SECONDS)
provisioning_locks = ProvisioningLockRegistry()
allowlist = SuperadminAllowlist.from_config(ApplicationConfig)

SELECTION_ROLE_HEADER = "X-Role-Selection"
SELECTION_TENANT_HEADER = "X-Tenant-Selection"
OVERRIDE_ROLE_HEADER = "X-Override-Role"
OVERRIDE_TENANT_HEADER = "X-Override-Tenant"


@dataclass(frozen=True)
class CallerSession:
    identity: Identity
    session_id: Optional[str]


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session, tenant_guard)


def get_allowlist() -> SuperadminAllowlist:
    return allowlist


def get_access_cache() -> SessionAccessCache:
    return access_cache


def get_provisioning_locks() -> ProvisioningLockRegistry:
    return provisioning_locks


def get_identity_provider(uow: UnitOfWork = Depends(get_unit_of_work)) -> IIdentityProvider:
    return LocalIdentityProvider(
        uow,
        portal_url=ApplicationConfig.PORTAL_URL,
        recovery_token_ttl_minutes=ApplicationConfig.RECOVERY_TOKEN_TTL_MINUTES,
    )


def get_role_resolver(
    uow: UnitOfWork = Depends(get_unit_of_work),
    allowlist: SuperadminAllowlist = Depends(get_allowlist),
    cache: SessionAccessCache = Depends(get_access_cache),
) -> RoleResolver:
    return RoleResolver(
        uow, allowlist, non_production=ApplicationConfig.NON_PRODUCTION, cache=cache
    )


async def get_caller_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> CallerSession:
    """
    Dependency to authenticate the bearer session token.

    Raises:
        ClientError: 401 if the header is missing, the token is invalid or
            expired, or its identity no longer exists
    """
    if credentials is None:
        raise ClientError(
            Error(ErrorKind.authentication.value, "Missing authorization header"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error(ErrorKind.authentication.value, "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    identity = await identity_provider.get_current_identity(credentials.credentials)
    if identity is None:
        raise ClientError(
            Error(ErrorKind.authentication.value, "Invalid authentication"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return CallerSession(identity=identity, session_id=payload.get("sid"))


def _parse_override(request: Request, role_header: str, tenant_header: str) -> Optional[RoleOverride]:
    role = request.headers.get(role_header)
    if not role:
        return None
    try:
        access_role = AccessRole(role)
    except ValueError:
        raise ClientError(
            Error(ErrorKind.validation.value, f"Invalid role in {role_header}: {role}"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return RoleOverride(role=access_role, tenant_id=request.headers.get(tenant_header) or None)


def get_role_overrides(request: Request) -> Tuple[Optional[RoleOverride], Optional[RoleOverride]]:
    """
    Ephemeral selection and test override from request headers.

    Selection headers are only read when ALLOW_ROLE_SELECTION is set. The test
    override is always handed to the resolver, which drops it outside
    non-production configs.
    """
    selection = None
    if ApplicationConfig.ALLOW_ROLE_SELECTION:
        selection = _parse_override(request, SELECTION_ROLE_HEADER, SELECTION_TENANT_HEADER)
    test_override = _parse_override(request, OVERRIDE_ROLE_HEADER, OVERRIDE_TENANT_HEADER)
    return selection, test_override


def get_resolution_context(
    caller: CallerSession = Depends(get_caller_session),
    overrides: Tuple[Optional[RoleOverride], Optional[RoleOverride]] = Depends(get_role_overrides),
) -> ResolutionContext:
    selection, test_override = overrides
    return ResolutionContext(
        identity=caller.identity,
        selection=selection,
        test_override=test_override,
        session_id=caller.session_id,
    )


async def get_request_access(
    context: ResolutionContext = Depends(get_resolution_context),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> ResolvedAccess:
    """Access for read paths: overrides and the session cache apply"""
    return await resolver.resolve(context)


async def get_authoritative_access(
    caller: CallerSession = Depends(get_caller_session),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> ResolvedAccess:
    """Access for administrative actions: stored data only, never cached"""
    return await resolver.resolve(ResolutionContext(identity=caller.identity))
