from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.identity_repository import IdentityRepository
from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IdentityDomain


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # One identity repository per domain, sharing the session
        self.identities = {
            domain: IdentityRepository(self.session, domain) for domain in IdentityDomain
        }
        self.refresh_tokens = RefreshTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
