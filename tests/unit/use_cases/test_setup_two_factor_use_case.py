from uuid import uuid4
from urllib.parse import unquote

import pytest

from src.app.use_cases.two_factor import SetupTwoFactorUseCase
from src.domain.entities import IdentityDomain


@pytest.mark.asyncio
async def test_setup_stores_pending_secret(mock_uow, seed, stored, make_identity):
    identity = seed(make_identity(IdentityDomain.bank, email="viewer@bank.test"))

    result = await SetupTwoFactorUseCase(mock_uow).execute(identity.id, identity.domain)

    assert result.is_ok()
    assert len(result.value.secret) == 32
    assert result.value.qr_code.startswith("data:image/png;base64,")
    assert result.value.otpauth_url.startswith("otpauth://totp/")
    assert "Caster (viewer@bank.test)" in unquote(result.value.otpauth_url)
    assert "issuer=Caster" in result.value.otpauth_url

    current = stored(identity)
    assert current.two_factor_secret == result.value.secret
    assert current.two_factor_enabled is False
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_setup_again_replaces_pending_secret(mock_uow, seed, stored, make_identity):
    identity = seed(make_identity())
    use_case = SetupTwoFactorUseCase(mock_uow)

    first = await use_case.execute(identity.id, identity.domain)
    second = await use_case.execute(identity.id, identity.domain)

    assert first.value.secret != second.value.secret
    assert stored(identity).two_factor_secret == second.value.secret


@pytest.mark.asyncio
async def test_setup_rejected_while_enabled(mock_uow, seed, stored, make_identity):
    identity = seed(make_identity(two_factor_enabled=True, two_factor_secret="EXISTINGSECRET"))

    result = await SetupTwoFactorUseCase(mock_uow).execute(identity.id, identity.domain)

    assert result.is_err()
    assert result.error.code == "TWO_FACTOR_ALREADY_ENABLED"
    assert stored(identity).two_factor_secret == "EXISTINGSECRET"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_setup_unknown_identity(mock_uow):
    result = await SetupTwoFactorUseCase(mock_uow).execute(uuid4(), IdentityDomain.hitachi)

    assert result.is_err()
    assert result.error.code == "IDENTITY_NOT_FOUND"
