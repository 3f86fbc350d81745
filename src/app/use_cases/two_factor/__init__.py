"""
Two-Factor Enrollment Use Cases

Setup, verification and removal of TOTP-based 2FA.
"""

from .setup_two_factor_use_case import SetupTwoFactorUseCase
from .verify_two_factor_setup_use_case import VerifyTwoFactorSetupUseCase
from .disable_two_factor_use_case import DisableTwoFactorUseCase
from .dtos import (
    SetupTwoFactorResponse,
    VerifyTwoFactorSetupResponse,
    DisableTwoFactorResponse,
)

__all__ = [
    # Use Cases
    "SetupTwoFactorUseCase",
    "VerifyTwoFactorSetupUseCase",
    "DisableTwoFactorUseCase",
    # DTOs - Responses
    "SetupTwoFactorResponse",
    "VerifyTwoFactorSetupResponse",
    "DisableTwoFactorResponse",
]
