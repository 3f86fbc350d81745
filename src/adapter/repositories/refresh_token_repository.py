from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import col, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import IdentityDomain, RefreshToken, hash_refresh_token


class RefreshTokenRepository(IRefreshTokenRepository):
    """Refresh token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Persist a newly issued token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token(self, value: str) -> Optional[RefreshToken]:
        """Get token by plaintext value (hash lookup), in any state"""
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == hash_refresh_token(value)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def find_active(self, value: str, now: datetime) -> Optional[RefreshToken]:
        """Get token by plaintext value if not revoked and not expired"""
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == hash_refresh_token(value),
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at >= now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def _revoke_where(self, now: datetime, *criteria) -> int:
        # Only ever flips revoked False -> True
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.revoked == False, *criteria)  # noqa: E712
            .values(revoked=True, revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke(self, value: str, now: datetime) -> bool:
        """Revoke a token by plaintext value; no-op if absent or already revoked"""
        count = await self._revoke_where(
            now, RefreshToken.token_hash == hash_refresh_token(value)
        )
        return count > 0

    async def revoke_by_id(self, token_id: UUID, now: datetime) -> bool:
        """Revoke a token by ID; no-op if absent or already revoked"""
        count = await self._revoke_where(now, RefreshToken.id == token_id)
        return count > 0

    async def enforce_retention(
        self,
        identity_id: UUID,
        domain: IdentityDomain,
        keep: int,
        now: datetime,
        issued_id: Optional[UUID] = None,
    ) -> int:
        """
        Revoke all but the newest `keep` non-revoked tokens.

        The token named by `issued_id` is never a candidate, so the caller's
        fresh token survives even when timestamps tie. The candidate rows are
        read with FOR UPDATE (ignored by SQLite) so concurrent logins for the
        same identity serialize on the sweep. A transient overshoot is still
        possible and is corrected by the next issuance.
        """
        criteria = [
            RefreshToken.identity_id == identity_id,
            RefreshToken.domain == domain,
            RefreshToken.revoked == False,  # noqa: E712
        ]
        if issued_id is not None:
            criteria.append(RefreshToken.id != issued_id)
            keep -= 1

        stmt = (
            select(RefreshToken.id)
            .where(*criteria)
            .order_by(
                col(RefreshToken.created_at).desc(),
                col(RefreshToken.issued_ns).desc(),
            )
            .offset(max(keep, 0))
            .with_for_update()
        )
        result = await self.session.exec(stmt)
        stale_ids = list(result.all())
        if not stale_ids:
            return 0

        return await self._revoke_where(now, col(RefreshToken.id).in_(stale_ids))

    async def revoke_all(
        self, identity_id: UUID, domain: IdentityDomain, now: datetime
    ) -> int:
        """Revoke every non-revoked token for an identity"""
        return await self._revoke_where(
            now,
            RefreshToken.identity_id == identity_id,
            RefreshToken.domain == domain,
        )

    async def list_active(
        self, identity_id: UUID, domain: IdentityDomain, now: datetime
    ) -> List[RefreshToken]:
        """Non-revoked, unexpired tokens for an identity, newest first"""
        stmt = (
            select(RefreshToken)
            .where(
                RefreshToken.identity_id == identity_id,
                RefreshToken.domain == domain,
                RefreshToken.revoked == False,  # noqa: E712
                RefreshToken.expires_at >= now,
            )
            .order_by(
                col(RefreshToken.created_at).desc(),
                col(RefreshToken.issued_ns).desc(),
            )
        )
        result = await self.session.exec(stmt)
        return list(result.all())
