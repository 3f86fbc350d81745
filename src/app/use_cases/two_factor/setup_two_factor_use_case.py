"""
Setup Two-Factor Use Case

Starts TOTP enrollment by generating and storing a pending secret.
"""

import logging
from typing import Optional
from uuid import UUID

from src.libs.result import Error, Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.totp_service import TotpService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IdentityDomain
from .dtos import SetupTwoFactorResponse

logger = logging.getLogger(__name__)


class SetupTwoFactorUseCase:
    """
    Use case for initiating 2FA enrollment.

    Business Rules:
    - Only the secret is stored; two_factor_enabled stays false
    - Calling again before verification replaces the pending secret
    - Rejected with TWO_FACTOR_ALREADY_ENABLED while 2FA is active
    """

    def __init__(self, uow: UnitOfWork, totp: Optional[TotpService] = None):
        self.uow = uow
        self.totp = totp or TotpService()

    async def execute(
        self, identity_id: UUID, domain: IdentityDomain
    ) -> Result[SetupTwoFactorResponse]:
        """
        Execute 2FA setup use case.

        Args:
            identity_id: Authenticated identity
            domain: Identity domain

        Returns:
            Result with secret, provisioning URI and QR image, or Error
        """
        async with self.uow:
            resolved = await IdentityResolver(self.uow).get(domain, identity_id)
            if resolved.is_err():
                return resolved
            identity = resolved.value

            if identity.two_factor_enabled:
                return Return.err(
                    Error("TWO_FACTOR_ALREADY_ENABLED", "2FA is already enabled")
                )

            generated = self.totp.generate_secret(identity.email)
            qr_code = self.totp.render_qr(generated.otpauth_url)

            await self.uow.identities[domain].update(
                identity_id, {"two_factor_secret": generated.secret}
            )
            await self.uow.commit()

            logger.info(f"2FA setup initiated for {domain.value}:{identity_id}")
            return Return.ok(
                SetupTwoFactorResponse(
                    secret=generated.secret,
                    otpauth_url=generated.otpauth_url,
                    qr_code=qr_code,
                )
            )
