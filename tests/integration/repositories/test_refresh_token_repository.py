from datetime import datetime, timedelta
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlmodel import select

from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.domain.entities import IdentityDomain, RefreshToken

T0 = datetime(2026, 3, 1, 8, 0, 0)
TTL = timedelta(days=7)


@pytest_asyncio.fixture
async def repo(db_session):
    return RefreshTokenRepository(db_session)


async def _issue(repo, identity_id, created_at, domain=IdentityDomain.hitachi):
    record, value = RefreshToken.issue(identity_id, domain, created_at, TTL)
    await repo.create(record)
    return record, value


@pytest.mark.asyncio
async def test_only_hash_is_stored(repo, db_session):
    record, value = await _issue(repo, uuid4(), T0)
    await db_session.commit()

    rows = (await db_session.exec(select(RefreshToken))).all()
    assert len(rows) == 1
    assert rows[0].token_hash != value
    assert len(rows[0].token_hash) == 64

    found = await repo.get_by_token(value)
    assert found is not None and found.id == record.id
    assert await repo.get_by_token("not-a-token") is None


@pytest.mark.asyncio
async def test_retention_keeps_four_newest(repo, db_session):
    identity_id = uuid4()
    issued = [await _issue(repo, identity_id, T0 + timedelta(minutes=i)) for i in range(5)]

    revoked = await repo.enforce_retention(identity_id, IdentityDomain.hitachi, 4, T0)
    await db_session.commit()

    assert revoked == 1
    active = await repo.list_active(identity_id, IdentityDomain.hitachi, T0)
    assert [t.id for t in active] == [r.id for r, _ in reversed(issued[1:])]

    oldest = await repo.get_by_token(issued[0][1])
    assert oldest.revoked is True
    assert oldest.revoked_at == T0


@pytest.mark.asyncio
async def test_retention_is_scoped_to_identity_and_domain(repo, db_session):
    identity_id = uuid4()
    for i in range(4):
        await _issue(repo, identity_id, T0 + timedelta(minutes=i))
    # Same id in another domain and another identity in the same domain
    await _issue(repo, identity_id, T0, domain=IdentityDomain.bank)
    await _issue(repo, uuid4(), T0)

    revoked = await repo.enforce_retention(identity_id, IdentityDomain.hitachi, 4, T0)

    assert revoked == 0
    assert len(await repo.list_active(identity_id, IdentityDomain.bank, T0)) == 1


@pytest.mark.asyncio
async def test_revoke_is_idempotent_and_one_way(repo, db_session):
    record, value = await _issue(repo, uuid4(), T0)

    assert await repo.revoke(value, T0 + timedelta(hours=1)) is True
    assert await repo.revoke(value, T0 + timedelta(hours=2)) is False
    assert await repo.revoke_by_id(record.id, T0 + timedelta(hours=3)) is False
    await db_session.commit()

    stored = await repo.get_by_token(value)
    assert stored.revoked is True
    # First revocation time is kept
    assert stored.revoked_at == T0 + timedelta(hours=1)


@pytest.mark.asyncio
async def test_revoke_unknown_token(repo):
    assert await repo.revoke("missing", T0) is False
    assert await repo.revoke_by_id(uuid4(), T0) is False


@pytest.mark.asyncio
async def test_find_active_excludes_expired_and_revoked(repo, db_session):
    identity_id = uuid4()
    _, live = await _issue(repo, identity_id, T0)
    _, expired = await _issue(repo, identity_id, T0 - timedelta(days=8))
    _, revoked = await _issue(repo, identity_id, T0)
    await repo.revoke(revoked, T0)

    assert await repo.find_active(live, T0) is not None
    assert await repo.find_active(expired, T0) is None
    assert await repo.find_active(revoked, T0) is None
    # Still visible to lookups in any state
    assert await repo.get_by_token(expired) is not None


@pytest.mark.asyncio
async def test_revoke_all(repo, db_session):
    identity_id = uuid4()
    for i in range(3):
        await _issue(repo, identity_id, T0 + timedelta(minutes=i))
    other_id = uuid4()
    await _issue(repo, other_id, T0)

    assert await repo.revoke_all(identity_id, IdentityDomain.hitachi, T0) == 3
    assert await repo.revoke_all(identity_id, IdentityDomain.hitachi, T0) == 0
    assert await repo.list_active(identity_id, IdentityDomain.hitachi, T0) == []
    assert len(await repo.list_active(other_id, IdentityDomain.hitachi, T0)) == 1


@pytest.mark.asyncio
async def test_retention_never_evicts_issued_token_on_timestamp_tie(repo, db_session):
    identity_id = uuid4()
    issued = []
    for _ in range(6):
        record, value = await _issue(repo, identity_id, T0)
        await repo.enforce_retention(
            identity_id, IdentityDomain.hitachi, 4, T0, issued_id=record.id
        )
        assert await repo.find_active(value, T0) is not None
        issued.append(record)
    await db_session.commit()

    active = await repo.list_active(identity_id, IdentityDomain.hitachi, T0)
    assert [t.id for t in active] == [r.id for r in reversed(issued[2:])]


@pytest.mark.asyncio
async def test_retention_overshoot_is_corrected_by_next_issuance(repo, db_session):
    identity_id = uuid4()
    for i in range(4):
        await _issue(repo, identity_id, T0 + timedelta(minutes=i))

    # A concurrent login inserts after the other one's sweep has already run
    sweeping, _ = await _issue(repo, identity_id, T0 + timedelta(minutes=5))
    await repo.enforce_retention(
        identity_id, IdentityDomain.hitachi, 4, T0, issued_id=sweeping.id
    )
    await _issue(repo, identity_id, T0 + timedelta(minutes=4))
    await db_session.commit()
    assert len(await repo.list_active(identity_id, IdentityDomain.hitachi, T0)) == 5

    latest, _ = await _issue(repo, identity_id, T0 + timedelta(minutes=6))
    await repo.enforce_retention(
        identity_id, IdentityDomain.hitachi, 4, T0, issued_id=latest.id
    )
    await db_session.commit()

    active = await repo.list_active(identity_id, IdentityDomain.hitachi, T0)
    assert len(active) == 4
    assert active[0].id == latest.id
