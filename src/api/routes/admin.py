"""
Admin API Routes - Back-office Endpoints

Authentication is via Admin API Key, not identity access tokens.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import RevokeAllSessionsResponse, RevokeAllSessionsUseCase
from src.depends import get_unit_of_work
from src.domain.entities import IdentityDomain

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/identities/{domain}/{identity_id}/revoke-sessions",
    status_code=status.HTTP_200_OK,
    response_model=RevokeAllSessionsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def revoke_identity_sessions(
    domain: IdentityDomain,
    identity_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Force Logout Everywhere

    Revokes every refresh token of the identity. Access tokens already issued
    stay valid until they expire.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 422 Unprocessable Entity: Unknown domain or malformed ID
    """
    use_case = RevokeAllSessionsUseCase(uow)
    result = await use_case.execute(identity_id, domain)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
