import bcrypt
import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.domain.entities import (
    BankRole,
    HitachiDepartment,
    HitachiRole,
    Identity,
    IdentityDomain,
    IdentityStatus,
    PengelolaRole,
)

PASSWORD = "SecurePass123!"
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()

_DOMAIN_DEFAULTS = {
    IdentityDomain.hitachi: {
        "role": HitachiRole.rc_staff.value,
        "department": HitachiDepartment.repair_center.value,
    },
    IdentityDomain.pengelola: {"role": PengelolaRole.technician.value},
    IdentityDomain.bank: {"role": BankRole.viewer.value},
}


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def make_identity():
    """Build an Identity descriptor with sensible per-domain defaults"""

    def _make(domain: IdentityDomain = IdentityDomain.hitachi, **overrides) -> Identity:
        fields = {
            "id": uuid4(),
            "domain": domain,
            "username": "user1",
            "email": "user1@caster.test",
            "password_hash": PASSWORD_HASH,
            "full_name": "User One",
            "status": IdentityStatus.active,
            **_DOMAIN_DEFAULTS[domain],
        }
        if domain == IdentityDomain.pengelola:
            fields["pengelola_id"] = uuid4()
        elif domain == IdentityDomain.bank:
            fields["customer_bank_id"] = uuid4()
        fields.update(overrides)
        return Identity(**fields)

    return _make


def _identity_repository(store: dict):
    """Per-domain identity repository mock backed by a dict keyed by ID"""
    repo = MagicMock()

    async def get_by_username(username):
        return next((i for i in store.values() if i.username == username), None)

    async def get_by_id(identity_id):
        return store.get(identity_id)

    async def update(identity_id, fields):
        current = store.get(identity_id)
        if current is None:
            return None
        store[identity_id] = current.model_copy(update=fields)
        return store[identity_id]

    async def consume_backup_code(identity_id, code_hash):
        current = store.get(identity_id)
        if current is None or code_hash not in (current.two_factor_backup_codes or []):
            return False
        remaining = [h for h in current.two_factor_backup_codes if h != code_hash]
        store[identity_id] = current.model_copy(update={"two_factor_backup_codes": remaining})
        return True

    repo.get_by_username = AsyncMock(side_effect=get_by_username)
    repo.get_by_id = AsyncMock(side_effect=get_by_id)
    repo.update = AsyncMock(side_effect=update)
    repo.consume_backup_code = AsyncMock(side_effect=consume_backup_code)
    return repo


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identity_store = {domain: {} for domain in IdentityDomain}
    uow.identities = {
        domain: _identity_repository(uow.identity_store[domain]) for domain in IdentityDomain
    }

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.get_by_token = AsyncMock(return_value=None)
    uow.refresh_tokens.find_active = AsyncMock(return_value=None)
    uow.refresh_tokens.revoke = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_by_id = AsyncMock(return_value=True)
    uow.refresh_tokens.enforce_retention = AsyncMock(return_value=0)
    uow.refresh_tokens.revoke_all = AsyncMock(return_value=0)
    uow.refresh_tokens.list_active = AsyncMock(return_value=[])
    return uow


@pytest.fixture
def seed(mock_uow):
    """Place identities into the mocked identity stores"""

    def _seed(*identities: Identity):
        for identity in identities:
            mock_uow.identity_store[identity.domain][identity.id] = identity
        return identities[0] if len(identities) == 1 else identities

    return _seed


@pytest.fixture
def stored(mock_uow):
    """Read back the current state of a seeded identity"""

    def _stored(identity: Identity) -> Identity:
        return mock_uow.identity_store[identity.domain][identity.id]

    return _stored
