"""
Session Issuer

Establishes a full session for an identity whose credentials (and second
factor, if enabled) are already verified.
"""

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from src.api.utils.jwt import generate_access_token
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionResponse
from src.domain.base import Clock, utc_now
from src.domain.entities import Identity, RefreshToken

logger = logging.getLogger(__name__)


class SessionIssuer:
    """
    Issues access + refresh tokens.

    Business Rules:
    - Refresh token is committed before its value is handed back
    - Retention policy runs in the same transaction right after insertion and
      never evicts the token being issued
    - last_login_at is best effort; its failure never fails the login
    - Must be used inside an open unit of work
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def issue(self, identity: Identity) -> SessionResponse:
        now = self.clock()

        token, refresh_token = RefreshToken.issue(
            identity.id,
            identity.domain,
            now,
            timedelta(days=ApplicationConfig.REFRESH_TOKEN_TTL_DAYS),
        )
        await self.uow.refresh_tokens.create(token)

        evicted = await self.uow.refresh_tokens.enforce_retention(
            identity.id,
            identity.domain,
            ApplicationConfig.REFRESH_TOKEN_RETENTION,
            now,
            issued_id=token.id,
        )
        if evicted:
            logger.info(
                f"Retention revoked {evicted} refresh token(s) for {identity.domain.value}:{identity.id}"
            )

        await self.uow.commit()

        try:
            updated = await self.uow.identities[identity.domain].update(
                identity.id, {"last_login_at": now}
            )
            await self.uow.commit()
            if updated is not None:
                identity = updated
        except SQLAlchemyError as exc:
            await self.uow.rollback()
            logger.warning(f"Failed to record last login for {identity.id}: {exc}")

        return SessionResponse(
            access_token=generate_access_token(identity, now=now),
            refresh_token=refresh_token,
            identity=identity.to_summary(),
        )
