"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the session lifecycle.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel

from src.domain.entities import IdentityDomain, IdentitySummary


# ============================================================================
# Response DTOs
# ============================================================================


class SessionResponse(BaseModel):
    """Response for an established session (login without 2FA, 2FA verify)"""

    access_token: str
    refresh_token: str
    identity: IdentitySummary


class TwoFactorChallengeResponse(BaseModel):
    """Response for a login that still needs the second factor"""

    two_factor_required: Literal[True] = True
    temp_token: str
    identity_id: str
    domain: IdentityDomain


class RefreshTokenResponse(BaseModel):
    """Response for refresh token use case"""

    access_token: str
    refresh_token: str


class LogoutResponse(BaseModel):
    """Response for logout use case"""

    message: str


class RevokeAllSessionsResponse(BaseModel):
    """Response for revoke-all-sessions use case"""

    identity_id: str
    domain: IdentityDomain
    revoked_count: int


class ActiveSession(BaseModel):
    """A non-revoked, unexpired refresh token (never includes the value)"""

    id: str
    created_at: datetime
    expires_at: datetime


class ListSessionsResponse(BaseModel):
    """Response for list sessions use case"""

    sessions: List[ActiveSession]
