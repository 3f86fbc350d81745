"""
Redeem Backup Code Use Case

Completes a paused login with a one-time backup code instead of a TOTP code.
"""

import logging
from typing import Optional

from src.libs.result import Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.totp_service import BACKUP_CODE_PATTERN, TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from .dtos import SessionResponse
from .session_issuer import SessionIssuer
from .verify_login_two_factor_use_case import INVALID_TWO_FACTOR_SESSION

logger = logging.getLogger(__name__)


class RedeemBackupCodeUseCase:
    """
    Use case for exchanging a temporary 2FA token + backup code for a session.

    Business Rules:
    - Same temp-token checks as TOTP verification
    - Each backup code works once: its hash is removed atomically (compare-and-set)
      before the session is issued; losing a concurrent race counts as unknown
    - Unknown or already-used codes yield the generic AUTHENTICATION_FAILED error
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

    async def execute(self, temp_token: str, backup_code: str) -> Result[SessionResponse]:
        async with self.uow:
            identity = await IdentityResolver(self.uow).resolve_two_factor_challenge(
                temp_token
            )

            if (
                identity is None
                or not identity.is_active
                or not identity.two_factor_enabled
                or not identity.two_factor_backup_codes
            ):
                return Return.err(INVALID_TWO_FACTOR_SESSION)

            normalized = self.totp.normalize_backup_code(backup_code or "")
            if not BACKUP_CODE_PATTERN.match(normalized):
                return Return.err(INVALID_TWO_FACTOR_SESSION)

            code_hash = self.totp.hash_backup_code(normalized)
            consumed = await self.uow.identities[identity.domain].consume_backup_code(
                identity.id, code_hash
            )
            if not consumed:
                logger.info(f"Backup code rejected for {identity.domain.value}:{identity.id}")
                return Return.err(INVALID_TWO_FACTOR_SESSION)

            # Consumed code is committed together with the new session
            session = await SessionIssuer(self.uow, self.clock).issue(identity)
            logger.info(f"Backup code redeemed for {identity.domain.value}:{identity.id}")
            return Return.ok(session)
