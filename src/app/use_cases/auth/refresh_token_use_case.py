"""
Refresh Token Use Case

Exchanges a refresh token for a new access token.
"""

import logging

from src.libs.result import Error, Result, Return
from src.api.utils.jwt import generate_access_token
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - Unknown token: AUTHENTICATION_FAILED "Invalid refresh token"
    - Expired token: revoked on touch, then "Refresh token has expired";
      checked before revocation so repeat calls get the same answer
    - Revoked token: "Refresh token has been revoked"
    - Identity must still exist and be ACTIVE
    - The refresh token value is returned unchanged (no rotation)
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: Opaque refresh token value

        Returns:
            Result with RefreshTokenResponse, or Error
        """
        async with self.uow:
            now = self.clock()
            record = (
                await self.uow.refresh_tokens.get_by_token(refresh_token)
                if refresh_token
                else None
            )

            if record is None:
                return Return.err(Error("AUTHENTICATION_FAILED", "Invalid refresh token"))

            if record.is_expired(now):
                if not record.revoked:
                    await self.uow.refresh_tokens.revoke_by_id(record.id, now)
                    await self.uow.commit()
                    logger.info(f"Expired refresh token {record.id} revoked on use")
                return Return.err(Error("AUTHENTICATION_FAILED", "Refresh token has expired"))

            if record.revoked:
                logger.warning(f"Revoked refresh token {record.id} presented")
                return Return.err(
                    Error("AUTHENTICATION_FAILED", "Refresh token has been revoked")
                )

            resolved = await IdentityResolver(self.uow).get(record.domain, record.identity_id)
            if resolved.is_err() or not resolved.value.is_active:
                return Return.err(
                    Error("AUTHENTICATION_FAILED", "Identity not found or inactive")
                )

            return Return.ok(
                RefreshTokenResponse(
                    access_token=generate_access_token(resolved.value, now=now),
                    refresh_token=refresh_token,
                )
            )
