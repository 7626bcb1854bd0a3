from fastapi import APIRouter, Depends, status

from partner_iam.api.error import ClientError, ServerError
from partner_iam.app.services.role_resolver import ResolutionContext, RoleResolver
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.app.use_cases.access import ContextResponse, LoadContextUseCase
from partner_iam.depends import get_resolution_context, get_role_resolver, get_unit_of_work
from partner_iam.domain.errors import ErrorKind

router = APIRouter(tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ContextResponse)
async def get_me(
    context: ResolutionContext = Depends(get_resolution_context),
    resolver: RoleResolver = Depends(get_role_resolver),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Load current identity and resolved access

    Returns the identity, the effective (role, tenant_id) for this request and
    the stored membership, if any. An identity without a membership resolves
    to role "unknown" rather than failing.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 500 Internal Server Error: Server error
    """
    use_case = LoadContextUseCase(uow, resolver)
    result = await use_case.execute(context)

    if result.is_err():
        error = result.error
        if error.code == ErrorKind.authentication.value:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value
