"""
RefreshToken Entity

Opaque long-lived credential exchanged for new access tokens.
"""

import hashlib
import secrets
import time
from datetime import datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID, uuid4

from sqlalchemy import BigInteger
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import IdentityDomain


def hash_refresh_token(value: str) -> str:
    """SHA-256 digest used as the lookup key; the plaintext is never stored"""
    return hashlib.sha256(value.encode()).hexdigest()


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - one row per established session.

    Business Rules:
    - Opaque value has 512 bits of entropy; only its SHA-256 hash is stored
    - expires_at is fixed at creation (7 days) and never extended
    - Never deleted; revoked rows remain as an audit trail
    - Revocation is one-way: repositories only update rows with revoked=False
    - At most N non-revoked tokens per (identity, domain), see enforce_retention
    - "Newest" means latest created_at, then latest issued_ns
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    identity_id: UUID = Field(nullable=False, index=True)
    domain: IdentityDomain = Field(nullable=False)

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    # Insertion order, breaks created_at ties between tokens issued in the same tick
    issued_ns: int = Field(default_factory=time.time_ns, sa_type=BigInteger)

    __table_args__ = (
        Index("idx_refresh_token_identity", "identity_id", "domain", "revoked"),
        Index("idx_refresh_token_expires_at", "expires_at"),
    )

    @classmethod
    def issue(
        cls,
        identity_id: UUID,
        domain: IdentityDomain,
        now: datetime,
        ttl: timedelta,
    ) -> Tuple["RefreshToken", str]:
        """Build a new unsaved token; returns (record, plaintext value)"""
        value = secrets.token_urlsafe(64)
        record = cls(
            token_hash=hash_refresh_token(value),
            identity_id=identity_id,
            domain=domain,
            created_at=now,
            expires_at=now + ttl,
        )
        return record, value

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now
