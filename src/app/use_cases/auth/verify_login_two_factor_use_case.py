"""
Verify Login Two-Factor Use Case

Completes a login that was paused for the second factor.
"""

import logging
from typing import Optional

from src.libs.result import Error, Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from .dtos import SessionResponse
from .session_issuer import SessionIssuer

logger = logging.getLogger(__name__)

INVALID_TWO_FACTOR_SESSION = Error("AUTHENTICATION_FAILED", "Invalid or expired 2FA session")


class VerifyLoginTwoFactorUseCase:
    """
    Use case for exchanging a temporary 2FA token + TOTP code for a session.

    Business Rules:
    - Temp token must be validly signed, unexpired and flagged is_two_factor_temp
    - Identity comes from the token claims only, never from the client
    - Identity must be ACTIVE with 2FA enabled and a stored secret
    - Every failure is the same generic AUTHENTICATION_FAILED error
    """

    def __init__(
        self,
        uow: UnitOfWork,
        totp: Optional[TotpService] = None,
        clock: Clock = utc_now,
    ):
        self.uow = uow
        self.totp = totp or TotpService()
        self.clock = clock

    async def execute(self, temp_token: str, code: str) -> Result[SessionResponse]:
        """
        Execute verify login 2FA use case.

        Args:
            temp_token: Temporary token returned by login
            code: 6-digit TOTP code

        Returns:
            Result with SessionResponse, or Error
        """
        async with self.uow:
            identity = await IdentityResolver(self.uow).resolve_two_factor_challenge(
                temp_token
            )

            if (
                identity is None
                or not identity.is_active
                or not identity.two_factor_enabled
                or not identity.two_factor_secret
            ):
                logger.info("2FA login rejected: invalid challenge")
                return Return.err(INVALID_TWO_FACTOR_SESSION)

            if not self.totp.verify_code(identity.two_factor_secret, code):
                logger.info(f"2FA login rejected: wrong code for {identity.domain.value}:{identity.id}")
                return Return.err(INVALID_TWO_FACTOR_SESSION)

            session = await SessionIssuer(self.uow, self.clock).issue(identity)
            return Return.ok(session)
