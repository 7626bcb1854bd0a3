"""
Tenant-scoped read routes

Every query here goes through the tenant filter guard in the repositories.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from partner_iam.api.error import ServerError
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.app.use_cases.access import (
    ActivityPage,
    DeliverableInfo,
    GetActivityUseCase,
    ListDeliverablesUseCase,
)
from partner_iam.depends import get_request_access, get_unit_of_work
from partner_iam.domain.access import ResolvedAccess

router = APIRouter(tags=["Tenant Data"])


@router.get(
    "/deliverables", status_code=status.HTTP_200_OK, response_model=List[DeliverableInfo]
)
async def list_deliverables(
    access: ResolvedAccess = Depends(get_request_access),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List deliverables visible to the caller

    Admins see every tenant. Partners see their own tenant only. Callers with
    no tenant scope get an empty list.

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 500 Internal Server Error: Server error
    """
    use_case = ListDeliverablesUseCase(uow)
    result = await use_case.execute(access)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/activity", status_code=status.HTTP_200_OK, response_model=ActivityPage)
async def get_activity(
    limit: int = Query(50, ge=1, le=100, description="Number of entries to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
    access: ResolvedAccess = Depends(get_request_access),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Activity log, newest first, scoped like deliverables

    Raises:
        - 401 Unauthorized: Missing, invalid or expired token
        - 500 Internal Server Error: Server error
    """
    use_case = GetActivityUseCase(uow)
    result = await use_case.execute(access, limit=limit, cursor=cursor)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
