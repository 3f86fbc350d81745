"""
Authentication Use Cases

Session lifecycle: login, second factor, refresh, logout, revocation.
"""

from .session_issuer import SessionIssuer
from .login_use_case import LoginUseCase
from .verify_login_two_factor_use_case import VerifyLoginTwoFactorUseCase
from .redeem_backup_code_use_case import RedeemBackupCodeUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .revoke_all_sessions_use_case import RevokeAllSessionsUseCase
from .list_sessions_use_case import ListSessionsUseCase
from .get_profile_use_case import GetProfileUseCase
from .dtos import (
    SessionResponse,
    TwoFactorChallengeResponse,
    RefreshTokenResponse,
    LogoutResponse,
    RevokeAllSessionsResponse,
    ActiveSession,
    ListSessionsResponse,
)

__all__ = [
    # Services
    "SessionIssuer",
    # Use Cases
    "LoginUseCase",
    "VerifyLoginTwoFactorUseCase",
    "RedeemBackupCodeUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RevokeAllSessionsUseCase",
    "ListSessionsUseCase",
    "GetProfileUseCase",
    # DTOs - Responses
    "SessionResponse",
    "TwoFactorChallengeResponse",
    "RefreshTokenResponse",
    "LogoutResponse",
    "RevokeAllSessionsResponse",
    "ListSessionsResponse",
    # DTOs - Nested Models
    "ActiveSession",
]
