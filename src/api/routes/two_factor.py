from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.two_factor import (
    DisableTwoFactorResponse,
    DisableTwoFactorUseCase,
    SetupTwoFactorResponse,
    SetupTwoFactorUseCase,
    VerifyTwoFactorSetupResponse,
    VerifyTwoFactorSetupUseCase,
)
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/auth/2fa", tags=["Two-Factor"])


class TwoFactorCodeRequest(BaseModel):
    """6-digit TOTP code payload"""

    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit TOTP code")


@router.post("/setup", status_code=status.HTTP_200_OK, response_model=SetupTwoFactorResponse)
async def setup_two_factor(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Initialize 2FA Setup

    Generates a secret and QR code. 2FA stays disabled until verify-setup.

    Raises:
        - 401 Unauthorized: Invalid access token
        - 404 Not Found: Identity no longer exists
        - 409 Conflict: 2FA already enabled
    """
    use_case = SetupTwoFactorUseCase(uow)
    result = await use_case.execute(current_user["identity_id"], current_user["domain"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/verify-setup",
    status_code=status.HTTP_200_OK,
    response_model=VerifyTwoFactorSetupResponse,
)
async def verify_two_factor_setup(
    request: TwoFactorCodeRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Verify and Enable 2FA

    Returns the backup codes; they are not retrievable afterwards.

    Raises:
        - 401 Unauthorized: Invalid access token or wrong code
        - 409 Conflict: Setup not initiated
        - 422 Unprocessable Entity: Code is not 6 digits
    """
    use_case = VerifyTwoFactorSetupUseCase(uow)
    result = await use_case.execute(
        current_user["identity_id"], current_user["domain"], request.code
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/disable", status_code=status.HTTP_200_OK, response_model=DisableTwoFactorResponse)
async def disable_two_factor(
    request: TwoFactorCodeRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Disable 2FA

    Requires a valid current code.

    Raises:
        - 401 Unauthorized: Invalid access token, 2FA not enabled, or wrong code
        - 422 Unprocessable Entity: Code is not 6 digits
    """
    use_case = DisableTwoFactorUseCase(uow)
    result = await use_case.execute(
        current_user["identity_id"], current_user["domain"], request.code
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
