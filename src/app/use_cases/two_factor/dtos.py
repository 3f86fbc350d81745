"""
Two-Factor Enrollment DTOs
"""

from typing import List

from pydantic import BaseModel

from src.domain.entities import IdentitySummary


class SetupTwoFactorResponse(BaseModel):
    """Response for 2FA setup: secret and QR for the authenticator app"""

    secret: str
    otpauth_url: str
    qr_code: str  # data:image/png;base64,...


class VerifyTwoFactorSetupResponse(BaseModel):
    """Response for 2FA setup verification; backup codes are shown only here"""

    backup_codes: List[str]
    identity: IdentitySummary


class DisableTwoFactorResponse(BaseModel):
    """Response for disabling 2FA"""

    message: str
    identity: IdentitySummary
