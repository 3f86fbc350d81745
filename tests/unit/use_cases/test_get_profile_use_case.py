from uuid import uuid4

import pytest

from src.app.use_cases.auth import GetProfileUseCase
from src.domain.entities import IdentityDomain


@pytest.mark.asyncio
async def test_profile_is_sanitized(mock_uow, seed, make_identity):
    identity = seed(
        make_identity(
            IdentityDomain.bank, two_factor_enabled=True, two_factor_secret="JBSWY3DPEHPK3PXP"
        )
    )

    result = await GetProfileUseCase(mock_uow).execute(identity.id, identity.domain)

    assert result.is_ok()
    dumped = result.value.model_dump()
    assert dumped["domain"] == IdentityDomain.bank
    assert dumped["customer_bank_id"] == str(identity.customer_bank_id)
    assert "password_hash" not in dumped
    assert "two_factor_secret" not in dumped
    assert "two_factor_backup_codes" not in dumped


@pytest.mark.asyncio
async def test_profile_unknown_identity(mock_uow):
    result = await GetProfileUseCase(mock_uow).execute(uuid4(), IdentityDomain.pengelola)

    assert result.is_err()
    assert result.error.code == "IDENTITY_NOT_FOUND"
