"""
Use Cases

Organized into domain folders:
- auth/: Session lifecycle
- two_factor/: 2FA enrollment
"""

from .auth import (
    LoginUseCase,
    VerifyLoginTwoFactorUseCase,
    RedeemBackupCodeUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    RevokeAllSessionsUseCase,
    ListSessionsUseCase,
    GetProfileUseCase,
)
from .two_factor import (
    SetupTwoFactorUseCase,
    VerifyTwoFactorSetupUseCase,
    DisableTwoFactorUseCase,
)

__all__ = [
    # Auth
    "LoginUseCase",
    "VerifyLoginTwoFactorUseCase",
    "RedeemBackupCodeUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "RevokeAllSessionsUseCase",
    "ListSessionsUseCase",
    "GetProfileUseCase",
    # Two-factor
    "SetupTwoFactorUseCase",
    "VerifyTwoFactorSetupUseCase",
    "DisableTwoFactorUseCase",
]
