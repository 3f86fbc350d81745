"""
Verify Two-Factor Setup Use Case

Confirms enrollment with a first valid code and enables 2FA.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IdentityDomain
from .dtos import VerifyTwoFactorSetupResponse
from .validation import validate_totp_code

logger = logging.getLogger(__name__)


class VerifyTwoFactorSetupUseCase:
    """
    Use case for completing 2FA enrollment.

    Business Rules:
    - Requires a pending secret from setup (TWO_FACTOR_NOT_INITIATED otherwise)
    - Wrong code: AUTHENTICATION_FAILED, nothing changes
    - Success enables 2FA and replaces the backup codes; plaintext codes are
      returned once, only their hashes are stored
    """

    def __init__(self, uow: UnitOfWork, totp: Optional[TotpService] = None):
        self.uow = uow
        self.totp = totp or TotpService()

    async def execute(
        self, identity_id: UUID, domain: IdentityDomain, code: str
    ) -> Result[VerifyTwoFactorSetupResponse]:
        invalid = validate_totp_code(code)
        if invalid:
            return Return.err(invalid)

        async with self.uow:
            resolved = await IdentityResolver(self.uow).get(domain, identity_id)
            if resolved.is_err():
                return resolved
            identity = resolved.value

            if not identity.two_factor_secret:
                return Return.err(Error("TWO_FACTOR_NOT_INITIATED", "2FA setup not initiated"))

            if not self.totp.verify_code(identity.two_factor_secret, code):
                return Return.err(Error("AUTHENTICATION_FAILED", "Invalid authentication code"))

            backup_codes = self.totp.generate_backup_codes()
            updated = await self.uow.identities[domain].update(
                identity_id,
                {
                    "two_factor_enabled": True,
                    "two_factor_backup_codes": [
                        self.totp.hash_backup_code(c) for c in backup_codes
                    ],
                },
            )
            await self.uow.commit()

            logger.info(f"2FA enabled for {domain.value}:{identity_id}")
            return Return.ok(
                VerifyTwoFactorSetupResponse(
                    backup_codes=backup_codes, identity=updated.to_summary()
                )
            )
