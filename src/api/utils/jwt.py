from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig
from src.domain.entities import Identity, IdentityDomain


def _encode(payload: dict, now: datetime, expires_delta: timedelta) -> str:
    payload = {**payload, "iat": now, "exp": now + expires_delta}
    return jwt.encode(
        payload, ApplicationConfig.JWT_SECRET, algorithm=ApplicationConfig.JWT_ALGORITHM
    )


def generate_access_token(identity: Identity, now: Optional[datetime] = None) -> str:
    """
    Generate JWT access token for an established session

    Args:
        identity: Resolved identity
        now: Issue time (defaults to current UTC time)

    Returns:
        JWT token string (HS256, ACCESS_TOKEN_TTL_MINUTES expiry)
    """
    payload = {
        "sub": str(identity.id),
        "domain": identity.domain.value,
        "role": identity.role,
        "username": identity.username,
        "email": identity.email,
        **identity.linkage_claims(),
    }
    return _encode(
        payload,
        now or datetime.now(UTC),
        timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_TTL_MINUTES),
    )


def generate_two_factor_token(
    identity_id: UUID, domain: IdentityDomain, now: Optional[datetime] = None
) -> str:
    """
    Generate temporary token asserting "password verified, second factor pending"

    The token carries no role or linkage claims and is rejected by every
    bearer-protected route.

    Returns:
        JWT token string (HS256, TWO_FACTOR_TOKEN_TTL_MINUTES expiry)
    """
    payload = {
        "sub": str(identity_id),
        "domain": domain.value,
        "is_two_factor_temp": True,
    }
    return _encode(
        payload,
        now or datetime.now(UTC),
        timedelta(minutes=ApplicationConfig.TWO_FACTOR_TOKEN_TTL_MINUTES),
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            ApplicationConfig.JWT_SECRET,
            algorithms=[ApplicationConfig.JWT_ALGORITHM],
        )
        return payload
    except JWTError:
        return None
