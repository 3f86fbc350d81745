"""
Login Use Case

Handles credential verification across identity domains and either
establishes a session or opens a two-factor challenge.
"""

import logging
from typing import Union

from src.libs.result import Result, Return
from src.api.utils.jwt import generate_two_factor_token
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from .dtos import SessionResponse, TwoFactorChallengeResponse
from .session_issuer import SessionIssuer

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for username/password login.

    Business Rules:
    - Identity must exist in some domain, have a matching password and be ACTIVE
    - Failure is always the same generic AUTHENTICATION_FAILED error
    - 2FA disabled: full session issued immediately
    - 2FA enabled: only a 5-minute temporary token is issued; no refresh or
      access token exists until the second factor is verified
    """

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, username: str, password: str
    ) -> Result[Union[SessionResponse, TwoFactorChallengeResponse]]:
        """
        Execute login use case.

        Args:
            username: Username in any identity domain
            password: Plain text password

        Returns:
            Result with SessionResponse or TwoFactorChallengeResponse, or Error
        """
        async with self.uow:
            resolved = await IdentityResolver(self.uow).authenticate(username, password)
            if resolved.is_err():
                return resolved

            identity = resolved.value

            if identity.two_factor_enabled:
                logger.info(f"2FA challenge opened for {identity.domain.value}:{identity.id}")
                return Return.ok(
                    TwoFactorChallengeResponse(
                        temp_token=generate_two_factor_token(
                            identity.id, identity.domain, now=self.clock()
                        ),
                        identity_id=str(identity.id),
                        domain=identity.domain,
                    )
                )

            session = await SessionIssuer(self.uow, self.clock).issue(identity)
            logger.info(f"Session established for {identity.domain.value}:{identity.id}")
            return Return.ok(session)
