from uuid import UUID

from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import Clock, utc_now
from src.domain.entities import IdentityDomain
from .dtos import ActiveSession, ListSessionsResponse


class ListSessionsUseCase:
    """Lists an identity's active sessions (refresh tokens), newest first"""

    def __init__(self, uow: UnitOfWork, clock: Clock = utc_now):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, identity_id: UUID, domain: IdentityDomain
    ) -> Result[ListSessionsResponse]:
        async with self.uow:
            tokens = await self.uow.refresh_tokens.list_active(
                identity_id, domain, self.clock()
            )
            return Return.ok(
                ListSessionsResponse(
                    sessions=[
                        ActiveSession(
                            id=str(t.id), created_at=t.created_at, expires_at=t.expires_at
                        )
                        for t in tokens
                    ]
                )
            )
