from uuid import UUID

import bcrypt
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import get_unit_of_work
from src.domain.entities import IDENTITY_MODELS, IdentityDomain, IdentityStatus
from tests.fixtures.json_loader import TestDataLoader


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def identities(db_session, test_data):
    """
    Seed every identity from test_data.json.

    Returns:
        Dict of username -> (domain, id)
    """
    password_hash = bcrypt.hashpw(
        test_data.get("password").encode(), bcrypt.gensalt(4)
    ).decode()

    seeded = {}
    for domain_value, rows in test_data.get_copy("identities").items():
        domain = IdentityDomain(domain_value)
        model = IDENTITY_MODELS[domain]
        for row in rows:
            row["id"] = UUID(row["id"])
            row["status"] = IdentityStatus(row["status"])
            for linkage in ("pengelola_id", "customer_bank_id"):
                if linkage in row:
                    row[linkage] = UUID(row[linkage])
            db_session.add(model(password_hash=password_hash, **row))
            seeded[row["username"]] = (domain, row["id"])

    await db_session.commit()
    return seeded


@pytest_asyncio.fixture
async def client(db_session, identities):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
