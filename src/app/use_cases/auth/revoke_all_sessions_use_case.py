"""
Revoke All Sessions Use Case

Force-logout-everywhere for one identity.
"""

import logging
from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from src.domain.entities import IdentityDomain
from .dtos import RevokeAllSessionsResponse

logger = logging.getLogger(__name__)


class RevokeAllSessionsUseCase:
    """
    Use case for revoking every refresh token of an identity.

    Business Rules:
    - Only non-revoked tokens are touched
    - Used by admins (force logout) and by identities themselves (logout all devices)
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, identity_id: UUID, domain: IdentityDomain
    ) -> Result[RevokeAllSessionsResponse]:
        async with self.uow:
            count = await self.uow.refresh_tokens.revoke_all(identity_id, domain, self.clock())
            await self.uow.commit()

            logger.info(f"Revoked {count} session(s) for {domain.value}:{identity_id}")
            return Return.ok(
                RevokeAllSessionsResponse(
                    identity_id=str(identity_id), domain=domain, revoked_count=count
                )
            )
