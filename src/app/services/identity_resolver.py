"""
Identity Resolver

Credential verification across the three identity domains, and identity
lookup from token claims.
"""

import logging
from typing import Optional
from uuid import UUID

import bcrypt

from config import ApplicationConfig
from src.libs.result import Error, Result, Return
from src.api.utils.jwt import verify_jwt
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Identity, IdentityDomain, LOGIN_DOMAIN_ORDER

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("AUTHENTICATION_FAILED", "Invalid credentials")

# Checked when no domain knows the username so response time stays flat
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(ApplicationConfig.BCRYPT_ROUNDS))


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Bcrypt hash for storing a password"""
    salt = bcrypt.gensalt(rounds or ApplicationConfig.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def _check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


class IdentityResolver:
    """
    Resolves identities across HITACHI, PENGELOLA and BANK stores.

    Business Rules:
    - Domains are tried in a fixed order; first active match with a valid password wins
    - Failures are never differentiated (no account or domain enumeration)
    - Must be used inside an open unit of work
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def authenticate(self, username: str, password: str) -> Result[Identity]:
        """
        Verify username/password against every identity domain.

        Returns:
            Result with the matching Identity, or AUTHENTICATION_FAILED
        """
        found_any = False
        for domain in LOGIN_DOMAIN_ORDER:
            identity = await self.uow.identities[domain].get_by_username(username)
            if identity is None:
                continue
            found_any = True
            if _check_password(password, identity.password_hash) and identity.is_active:
                return Return.ok(identity)

        if not found_any:
            bcrypt.checkpw(b"dummy_password", _DUMMY_HASH)

        logger.info("Login rejected: invalid credentials")
        return Return.err(INVALID_CREDENTIALS)

    async def get(self, domain: IdentityDomain, identity_id: UUID) -> Result[Identity]:
        """Load an identity by domain and ID"""
        identity = await self.uow.identities[domain].get_by_id(identity_id)
        if identity is None:
            return Return.err(Error("IDENTITY_NOT_FOUND", "Identity not found"))
        return Return.ok(identity)

    async def resolve_two_factor_challenge(self, temp_token: str) -> Optional[Identity]:
        """
        Load the identity a temporary two-factor token was issued for.

        The identity comes only from the token's own claims. Returns None for a
        bad signature, expired token, wrong token type or unknown identity.
        """
        payload = verify_jwt(temp_token) if temp_token else None
        if payload is None or payload.get("is_two_factor_temp") is not True:
            return None

        try:
            domain = IdentityDomain(payload.get("domain"))
            identity_id = UUID(payload.get("sub"))
        except (TypeError, ValueError):
            return None

        return await self.uow.identities[domain].get_by_id(identity_id)
