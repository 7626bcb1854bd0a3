from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from partner_iam.api.error import ClientError, ServerError
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.app.use_cases.auth import (
    ConfirmRecoveryResponse,
    ConfirmRecoveryUseCase,
    LoginResponse,
    LoginUseCase,
)
from partner_iam.depends import get_unit_of_work
from partner_iam.domain.errors import ErrorKind

router = APIRouter(prefix="/auth", tags=["Authentication"])


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Identity email address")
    password: str = Field(..., min_length=1, description="Password")


class ConfirmRecoveryRequest(BaseModel):
    """
    Credential recovery payload

    The token comes from the recovery link issued at provisioning time.
    """

    token: str = Field(..., min_length=1, description="Recovery token from the link")
    new_password: str = Field(..., description="New password (min 8 chars)")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Password login

    Issues a session token. The token carries the identity and a fresh
    session id, never a role: access is resolved per request.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code == ErrorKind.authentication.value:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


@router.post(
    "/recovery/confirm",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmRecoveryResponse,
)
async def confirm_recovery(
    request: ConfirmRecoveryRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Set a password through a recovery link

    Raises:
        - 400 Bad Request: Invalid, expired or used token, weak password
        - 404 Not Found: Identity no longer exists
        - 500 Internal Server Error: Server error
    """
    use_case = ConfirmRecoveryUseCase(uow)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        error = result.error
        if error.code == ErrorKind.validation.value:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == ErrorKind.not_found.value:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
