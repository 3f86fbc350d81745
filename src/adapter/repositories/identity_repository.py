import json
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import String, cast
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.identity_repository import IIdentityRepository
from src.domain.entities import IDENTITY_MODELS, Identity, IdentityDomain

# Retries when a concurrent redemption changed the list between read and write
_CONSUME_ATTEMPTS = 3


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel, bound to one domain's table"""

    def __init__(self, session: AsyncSession, domain: IdentityDomain):
        self.session = session
        self.domain = domain
        self.model = IDENTITY_MODELS[domain]

    async def _get_record(self, identity_id: UUID):
        # Always reflect the row as stored, not a cached instance
        stmt = (
            select(self.model)
            .where(self.model.id == identity_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[Identity]:
        """Get identity by username"""
        stmt = select(self.model).where(self.model.username == username)
        result = await self.session.exec(stmt)
        record = result.one_or_none()
        return Identity.from_record(self.domain, record) if record else None

    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        record = await self._get_record(identity_id)
        return Identity.from_record(self.domain, record) if record else None

    async def update(self, identity_id: UUID, fields: Dict[str, Any]) -> Optional[Identity]:
        """Apply field updates to the identity row"""
        unknown = set(fields) - set(self.model.model_fields)
        if unknown or "id" in fields:
            raise ValueError(f"Cannot update fields on {self.model.__tablename__}: {sorted(unknown) or ['id']}")

        record = await self._get_record(identity_id)
        if record is None:
            return None

        for name, value in fields.items():
            setattr(record, name, value)
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return Identity.from_record(self.domain, record)

    async def consume_backup_code(self, identity_id: UUID, code_hash: str) -> bool:
        """
        Remove one backup code hash with a compare-and-set on the stored list.

        The UPDATE only applies while the list is still exactly what was read,
        so two redemptions can neither both remove the same code nor undo each
        other's removal.
        """
        column = self.model.two_factor_backup_codes
        for _ in range(_CONSUME_ATTEMPTS):
            stmt = select(column).where(self.model.id == identity_id)
            current = (await self.session.exec(stmt)).one_or_none()
            if not current or code_hash not in current:
                return False

            stmt = (
                update(self.model)
                .where(
                    self.model.id == identity_id,
                    cast(column, String) == json.dumps(current),
                )
                .values(two_factor_backup_codes=[h for h in current if h != code_hash])
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            if result.rowcount == 1:
                return True

        return False
