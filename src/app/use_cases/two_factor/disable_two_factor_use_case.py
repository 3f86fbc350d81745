"""
Disable Two-Factor Use Case

Turns 2FA off after checking a current code.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IdentityDomain
from .dtos import DisableTwoFactorResponse
from .validation import validate_totp_code

logger = logging.getLogger(__name__)


class DisableTwoFactorUseCase:
    """
    Use case for disabling 2FA.

    Business Rules:
    - 2FA must be enabled and the code must verify (AUTHENTICATION_FAILED otherwise)
    - On failure, secret/enabled/backup codes are left untouched
    - On success all three are cleared in one update
    """

    def __init__(self, uow: UnitOfWork, totp: Optional[TotpService] = None):
        self.uow = uow
        self.totp = totp or TotpService()

    async def execute(
        self, identity_id: UUID, domain: IdentityDomain, code: str
    ) -> Result[DisableTwoFactorResponse]:
        invalid = validate_totp_code(code)
        if invalid:
            return Return.err(invalid)

        async with self.uow:
            resolved = await IdentityResolver(self.uow).get(domain, identity_id)
            if resolved.is_err():
                return resolved
            identity = resolved.value

            if not identity.two_factor_enabled or not identity.two_factor_secret:
                return Return.err(Error("AUTHENTICATION_FAILED", "2FA is not enabled"))

            if not self.totp.verify_code(identity.two_factor_secret, code):
                return Return.err(Error("AUTHENTICATION_FAILED", "Invalid authentication code"))

            updated = await self.uow.identities[domain].update(
                identity_id,
                {
                    "two_factor_enabled": False,
                    "two_factor_secret": None,
                    "two_factor_backup_codes": None,
                },
            )
            await self.uow.commit()

            logger.info(f"2FA disabled for {domain.value}:{identity_id}")
            return Return.ok(
                DisableTwoFactorResponse(
                    message="2FA disabled successfully", identity=updated.to_summary()
                )
            )
