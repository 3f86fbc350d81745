from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.identity_resolver import IdentityResolver
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IdentityDomain, IdentitySummary


class GetProfileUseCase:
    """Returns the sanitized profile of the authenticated identity"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, identity_id: UUID, domain: IdentityDomain) -> Result[IdentitySummary]:
        async with self.uow:
            resolved = await IdentityResolver(self.uow).get(domain, identity_id)
            if resolved.is_err():
                return resolved
            return Return.ok(resolved.value.to_summary())
