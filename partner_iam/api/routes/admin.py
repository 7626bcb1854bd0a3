"""
Admin API Routes

Account provisioning and membership administration. The caller's access is
resolved from stored data only: session selections and test overrides never
apply to these endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from partner_iam.api.error import ClientError, ServerError
from partner_iam.app.services.access_cache import SessionAccessCache
from partner_iam.app.services.identity_provider import IIdentityProvider
from partner_iam.app.services.provisioning_locks import ProvisioningLockRegistry
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.app.use_cases.memberships import MembershipResponse, UpdateMembershipUseCase
from partner_iam.app.use_cases.provisioning import (
    ProvisionAccountCommand,
    ProvisionAccountResponse,
    ProvisionAccountUseCase,
)
from partner_iam.depends import (
    CallerSession,
    get_access_cache,
    get_authoritative_access,
    get_caller_session,
    get_identity_provider,
    get_provisioning_locks,
    get_unit_of_work,
)
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.errors import ErrorKind

router = APIRouter(prefix="/admin", tags=["Admin"])


class CreateUserRequest(BaseModel):
    """
    Provisioning HTTP request payload

    Field presence is checked by the saga itself so that empty values come
    back as VALIDATION_ERROR with a specific message.
    """

    email: EmailStr = Field(..., description="Email of the account to create")
    full_name: str = Field(..., description="Display name")
    role: str = Field(..., description="admin, partner or viewer")
    tenant_id: Optional[str] = Field(None, description="Tenant of the new membership")


class UpdateMembershipRequest(BaseModel):
    role: Optional[str] = Field(None, description="New stored role label")
    disabled: Optional[bool] = Field(None, description="Disable or re-enable")


@router.post(
    "/users", status_code=status.HTTP_201_CREATED, response_model=ProvisionAccountResponse
)
async def create_user(
    request: CreateUserRequest,
    caller: CallerSession = Depends(get_caller_session),
    access: ResolvedAccess = Depends(get_authoritative_access),
    uow: UnitOfWork = Depends(get_unit_of_work),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
    locks: ProvisioningLockRegistry = Depends(get_provisioning_locks),
):
    """
    Provision Account

    Creates an identity and its membership as one logical operation. If the
    membership cannot be written the identity is deleted again.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 403 Forbidden: Caller is not an admin, or grants admin without superadmin
        - 400 Bad Request: Missing fields, bad role, unknown tenant
        - 409 Conflict: Email already registered or provisioning in progress
        - 500 Internal Server Error: DEPENDENCY_ERROR, or COMPENSATION_FAILURE
          with the orphaned identity id
    """
    command = ProvisionAccountCommand(
        email=request.email,
        full_name=request.full_name,
        role=request.role,
        tenant_id=request.tenant_id,
    )

    use_case = ProvisionAccountUseCase(
        uow,
        identity_provider,
        locks,
        temp_credential_prefix=ApplicationConfig.TEMP_CREDENTIAL_PREFIX,
    )
    result = await use_case.execute(command, access, requester=caller.identity)

    if result.is_err():
        error = result.error
        if error.code == ErrorKind.authorization.value:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == ErrorKind.validation.value:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == ErrorKind.conflict.value:
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.patch(
    "/memberships/{membership_id}",
    status_code=status.HTTP_200_OK,
    response_model=MembershipResponse,
)
async def update_membership(
    membership_id: UUID,
    request: UpdateMembershipRequest,
    caller: CallerSession = Depends(get_caller_session),
    access: ResolvedAccess = Depends(get_authoritative_access),
    uow: UnitOfWork = Depends(get_unit_of_work),
    access_cache: SessionAccessCache = Depends(get_access_cache),
):
    """
    Change a membership's role or disabled flag

    Cached access of the affected identity is dropped so the change applies
    on its next request.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 403 Forbidden: Not an admin, or privileged change without superadmin
        - 400 Bad Request: Nothing to update or invalid role
        - 404 Not Found: Membership does not exist
        - 500 Internal Server Error: Server error
    """
    use_case = UpdateMembershipUseCase(uow, access_cache=access_cache)
    result = await use_case.execute(
        access,
        membership_id,
        role=request.role,
        disabled=request.disabled,
        requester=caller.identity,
    )

    if result.is_err():
        error = result.error
        if error.code == ErrorKind.authorization.value:
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == ErrorKind.validation.value:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == ErrorKind.not_found.value:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
