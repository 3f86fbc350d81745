import pyotp
import pytest

from src.app.services.totp_service import TotpService
from src.app.use_cases.two_factor import DisableTwoFactorUseCase

SECRET = pyotp.random_base32(length=32)


def _wrong_code() -> str:
    current = pyotp.TOTP(SECRET).now()
    return "000000" if current != "000000" else "111111"


@pytest.fixture
def enrolled(seed, make_identity):
    return seed(
        make_identity(
            two_factor_enabled=True,
            two_factor_secret=SECRET,
            two_factor_backup_codes=[TotpService.hash_backup_code("ABCDE-12345")],
        )
    )


@pytest.mark.asyncio
async def test_disable_clears_all_two_factor_state(mock_uow, enrolled, stored):
    result = await DisableTwoFactorUseCase(mock_uow).execute(
        enrolled.id, enrolled.domain, pyotp.TOTP(SECRET).now()
    )

    assert result.is_ok()
    assert result.value.message == "2FA disabled successfully"
    assert result.value.identity.two_factor_enabled is False

    current = stored(enrolled)
    assert current.two_factor_enabled is False
    assert current.two_factor_secret is None
    assert current.two_factor_backup_codes is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_disable_wrong_code_leaves_state(mock_uow, enrolled, stored):
    result = await DisableTwoFactorUseCase(mock_uow).execute(
        enrolled.id, enrolled.domain, _wrong_code()
    )

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_FAILED"
    assert stored(enrolled) == enrolled
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_disable_when_not_enabled(mock_uow, seed, make_identity):
    identity = seed(make_identity(two_factor_secret=SECRET))

    result = await DisableTwoFactorUseCase(mock_uow).execute(
        identity.id, identity.domain, pyotp.TOTP(SECRET).now()
    )

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_FAILED"
    assert result.error.message == "2FA is not enabled"


@pytest.mark.asyncio
async def test_disable_malformed_code(mock_uow, enrolled):
    result = await DisableTwoFactorUseCase(mock_uow).execute(
        enrolled.id, enrolled.domain, "12ab56"
    )

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
