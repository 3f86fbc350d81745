from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import IdentityDomain, RefreshToken


class IRefreshTokenRepository(ABC):
    """
    Refresh token store - application layer.

    Tokens are looked up by their plaintext value, which implementations hash
    before querying. Revocation is exposed only through the revoke* methods,
    which never touch rows that are already revoked.
    """

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Persist a newly issued token"""
        pass

    @abstractmethod
    async def get_by_token(self, value: str) -> Optional[RefreshToken]:
        """Get token by plaintext value, in any state"""
        pass

    @abstractmethod
    async def find_active(self, value: str, now: datetime) -> Optional[RefreshToken]:
        """Get token by plaintext value if not revoked and not expired"""
        pass

    @abstractmethod
    async def revoke(self, value: str, now: datetime) -> bool:
        """Revoke by plaintext value. Idempotent; True only if a row changed."""
        pass

    @abstractmethod
    async def revoke_by_id(self, token_id: UUID, now: datetime) -> bool:
        """Revoke by ID. Idempotent; True only if a row changed."""
        pass

    @abstractmethod
    async def enforce_retention(
        self,
        identity_id: UUID,
        domain: IdentityDomain,
        keep: int,
        now: datetime,
        issued_id: Optional[UUID] = None,
    ) -> int:
        """
        Revoke all but the newest `keep` non-revoked tokens. Returns count revoked.

        `issued_id` is the token just created by the caller; it always counts
        as one of the kept tokens.
        """
        pass

    @abstractmethod
    async def revoke_all(
        self, identity_id: UUID, domain: IdentityDomain, now: datetime
    ) -> int:
        """Revoke every non-revoked token for an identity. Returns count revoked."""
        pass

    @abstractmethod
    async def list_active(
        self, identity_id: UUID, domain: IdentityDomain, now: datetime
    ) -> List[RefreshToken]:
        """Non-revoked, unexpired tokens for an identity, newest first"""
        pass
