from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from src.domain.entities import Identity, IdentityDomain


class IIdentityRepository(ABC):
    """
    Identity store for a single identity domain - application layer.

    One instance per domain; the unit of work exposes them as
    ``uow.identities[domain]``.
    """

    domain: IdentityDomain

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[Identity]:
        """Get identity by username within this domain"""
        pass

    @abstractmethod
    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID within this domain"""
        pass

    @abstractmethod
    async def update(self, identity_id: UUID, fields: Dict[str, Any]) -> Optional[Identity]:
        """Apply field updates. Returns the updated identity, or None if absent."""
        pass

    @abstractmethod
    async def consume_backup_code(self, identity_id: UUID, code_hash: str) -> bool:
        """
        Atomically remove one backup code hash from the identity.

        Returns True only for the caller whose removal was applied; a code
        already consumed (or never issued) yields False.
        """
        pass
