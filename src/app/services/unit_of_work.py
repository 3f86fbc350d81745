from abc import ABC, abstractmethod
from typing import Mapping

from src.app.repositories.identity_repository import IIdentityRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import IdentityDomain


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    identities: Mapping[IdentityDomain, IIdentityRepository]
    refresh_tokens: IRefreshTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
