from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.domain.entities import IdentityDomain

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify the access token from Authorization header.

    Temporary two-factor tokens are rejected: they only prove the password
    step and must never grant access.

    Returns:
        Decoded JWT payload with "identity_id" (UUID) and "domain"
        (IdentityDomain) added

    Raises:
        HTTPException: 401 if token is invalid, expired or not an access token
    """
    payload = verify_jwt(credentials.credentials)

    if payload is None or payload.get("is_two_factor_temp"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        identity_id = UUID(payload["sub"])
        domain = IdentityDomain(payload["domain"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    return {**payload, "identity_id": identity_id, "domain": domain}
