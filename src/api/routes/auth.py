from typing import Optional, Union

from fastapi import APIRouter, Cookie, Depends, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    GetProfileUseCase,
    ListSessionsResponse,
    ListSessionsUseCase,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    RedeemBackupCodeUseCase,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RevokeAllSessionsResponse,
    RevokeAllSessionsUseCase,
    SessionResponse,
    TwoFactorChallengeResponse,
    VerifyLoginTwoFactorUseCase,
)
from src.depends import get_current_user, get_unit_of_work
from src.domain.entities import IdentitySummary

router = APIRouter(prefix="/auth", tags=["Authentication"])


def set_refresh_cookie(response: Response, refresh_token: str):
    """Keep the refresh token in an httpOnly cookie scoped to /auth"""
    response.set_cookie(
        ApplicationConfig.REFRESH_COOKIE_NAME,
        refresh_token,
        httponly=True,
        secure=ApplicationConfig.REFRESH_COOKIE_SECURE,
        samesite="lax",
        path=ApplicationConfig.REFRESH_COOKIE_PATH,
        max_age=ApplicationConfig.REFRESH_TOKEN_TTL_DAYS * 24 * 60 * 60,
    )


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    username: str = Field(..., min_length=1, max_length=100, description="Username")
    password: str = Field(..., min_length=1, description="Password")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=Union[SessionResponse, TwoFactorChallengeResponse],
)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Login

    Verifies username/password across all identity domains. Returns a full
    session, or a temporary token when the identity has 2FA enabled.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(request.username, request.password)

    if result.is_err():
        raise_for_error(result.error)

    if isinstance(result.value, SessionResponse):
        set_refresh_cookie(response, result.value.refresh_token)
    return result.value


class VerifyLoginTwoFactorRequest(BaseModel):
    """2FA login verification payload"""

    temp_token: str = Field(..., min_length=1, description="Temporary token from /auth/login")
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit TOTP code")


@router.post(
    "/2fa/verify-login", status_code=status.HTTP_200_OK, response_model=SessionResponse
)
async def verify_login_two_factor(
    request: VerifyLoginTwoFactorRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Verify 2FA Code During Login

    Raises:
        - 401 Unauthorized: Invalid/expired temp token or wrong code
        - 422 Unprocessable Entity: Code is not 6 digits
    """
    use_case = VerifyLoginTwoFactorUseCase(uow)
    result = await use_case.execute(request.temp_token, request.code)

    if result.is_err():
        raise_for_error(result.error)

    set_refresh_cookie(response, result.value.refresh_token)
    return result.value


class RedeemBackupCodeRequest(BaseModel):
    """Backup code login payload"""

    temp_token: str = Field(..., min_length=1, description="Temporary token from /auth/login")
    backup_code: str = Field(..., min_length=11, max_length=11, description="XXXXX-XXXXX")


@router.post(
    "/2fa/backup-code", status_code=status.HTTP_200_OK, response_model=SessionResponse
)
async def redeem_backup_code(
    request: RedeemBackupCodeRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Complete 2FA Login With a Backup Code

    Each backup code can be used once.

    Raises:
        - 401 Unauthorized: Invalid/expired temp token, unknown or used code
    """
    use_case = RedeemBackupCodeUseCase(uow)
    result = await use_case.execute(request.temp_token, request.backup_code)

    if result.is_err():
        raise_for_error(result.error)

    set_refresh_cookie(response, result.value.refresh_token)
    return result.value


class RefreshRequest(BaseModel):
    """
    Refresh token HTTP request payload

    The token may instead be sent in the refresh_token cookie.
    """

    refresh_token: Optional[str] = Field(None, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: Optional[RefreshRequest] = None,
    refresh_token: Optional[str] = Cookie(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Refresh Access Token

    Raises:
        - 401 Unauthorized: Missing, unknown, revoked or expired refresh token,
          or identity inactive
    """
    token = (request.refresh_token if request else None) or refresh_token

    use_case = RefreshTokenUseCase(uow)
    result = await use_case.execute(token or "")

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LogoutRequest(BaseModel):
    """Logout payload; the token may instead come from the refresh_token cookie"""

    refresh_token: Optional[str] = Field(None, description="Refresh token")


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    response: Response,
    request: Optional[LogoutRequest] = None,
    refresh_token: Optional[str] = Cookie(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Revokes the refresh token and clears the cookie. Always returns 200,
    whether or not the token existed.
    """
    token = (request.refresh_token if request else None) or refresh_token
    response.delete_cookie(
        ApplicationConfig.REFRESH_COOKIE_NAME, path=ApplicationConfig.REFRESH_COOKIE_PATH
    )

    use_case = LogoutUseCase(uow)
    result = await use_case.execute(token or "")
    return result.value


@router.post(
    "/logout-all", status_code=status.HTTP_200_OK, response_model=RevokeAllSessionsResponse
)
async def logout_all(
    response: Response,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout From All Devices

    Revokes every refresh token of the authenticated identity.
    """
    response.delete_cookie(
        ApplicationConfig.REFRESH_COOKIE_NAME, path=ApplicationConfig.REFRESH_COOKIE_PATH
    )

    use_case = RevokeAllSessionsUseCase(uow)
    result = await use_case.execute(current_user["identity_id"], current_user["domain"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/profile", status_code=status.HTTP_200_OK, response_model=IdentitySummary)
async def get_profile(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current Identity Profile

    Raises:
        - 401 Unauthorized: Invalid or expired access token
        - 404 Not Found: Identity no longer exists
    """
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user["identity_id"], current_user["domain"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/sessions", status_code=status.HTTP_200_OK, response_model=ListSessionsResponse)
async def list_sessions(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Active sessions of the authenticated identity (never exposes token values)"""
    use_case = ListSessionsUseCase(uow)
    result = await use_case.execute(current_user["identity_id"], current_user["domain"])

    if result.is_err():
        raise_for_error(result.error)

    return result.value
