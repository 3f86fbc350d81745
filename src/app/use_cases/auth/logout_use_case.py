"""
Logout Use Case

Revokes a single refresh token. Always reports success.
"""

import logging

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)

LOGGED_OUT = "Logged out successfully"


class LogoutUseCase:
    """
    Use case for logging out one session.

    Business Rules:
    - Idempotent: unknown, already revoked or empty tokens are not errors
    - Never fails and never reveals whether the token was valid
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(self, refresh_token: str) -> Result[LogoutResponse]:
        if refresh_token:
            try:
                async with self.uow:
                    await self.uow.refresh_tokens.revoke(refresh_token, self.clock())
                    await self.uow.commit()
            except Exception as exc:
                # Reporting failure here would leak token validity
                logger.error(f"Logout revocation failed: {exc}")

        return Return.ok(LogoutResponse(message=LOGGED_OUT))
