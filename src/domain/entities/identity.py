"""
Identity Entities

Three disjoint principal tables (Hitachi, Pengelola, Bank users) sharing
login semantics, plus the unified Identity descriptor the auth flows work on.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlmodel import JSON, DateTime, Field, SQLModel

from src.domain.base import utc_now
from .enums import IdentityDomain, IdentityStatus


class IdentityRecord(SQLModel):
    """
    Columns shared by every identity table.

    Business Rules:
    - Username and email are unique within a domain
    - Password stored as bcrypt hash
    - Two-factor secret/enabled/backup codes change together (see two_factor use cases)
    - Backup codes are stored as SHA-256 hashes, never plaintext
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    full_name: str = Field(max_length=255)
    status: IdentityStatus = Field(default=IdentityStatus.active)

    two_factor_enabled: bool = Field(default=False)
    two_factor_secret: Optional[str] = Field(default=None, max_length=64)
    two_factor_backup_codes: Optional[List[str]] = Field(default=None, sa_type=JSON)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
    last_login_at: Optional[datetime] = Field(default=None, sa_type=DateTime)


class HitachiUser(IdentityRecord, table=True):
    """Hitachi repair-center staff"""

    __tablename__ = "hitachi_users"

    role: str = Field(max_length=32)  # HitachiRole
    department: Optional[str] = Field(default=None, max_length=32)  # HitachiDepartment


class PengelolaUser(IdentityRecord, table=True):
    """Cash-management vendor staff, linked to a pengelola organization"""

    __tablename__ = "pengelola_users"

    role: str = Field(max_length=32)  # PengelolaRole
    pengelola_id: UUID = Field(index=True)


class BankUser(IdentityRecord, table=True):
    """Customer bank staff, linked to a customer bank"""

    __tablename__ = "bank_users"

    role: str = Field(max_length=32)  # BankRole
    customer_bank_id: UUID = Field(index=True)


# Domain registry: which table backs each identity domain
IDENTITY_MODELS: Dict[IdentityDomain, Type[IdentityRecord]] = {
    IdentityDomain.hitachi: HitachiUser,
    IdentityDomain.pengelola: PengelolaUser,
    IdentityDomain.bank: BankUser,
}

# Order in which login tries the domains
LOGIN_DOMAIN_ORDER = (
    IdentityDomain.hitachi,
    IdentityDomain.pengelola,
    IdentityDomain.bank,
)


class IdentitySummary(BaseModel):
    """Sanitized identity returned to clients"""

    id: str
    domain: IdentityDomain
    username: str
    email: str
    full_name: str
    role: str
    status: IdentityStatus
    two_factor_enabled: bool
    pengelola_id: Optional[str] = None
    customer_bank_id: Optional[str] = None
    department: Optional[str] = None
    last_login_at: Optional[datetime] = None


class Identity(BaseModel):
    """Unified identity descriptor, tagged with its domain"""

    id: UUID
    domain: IdentityDomain
    username: str
    email: str
    password_hash: str
    full_name: str
    role: str
    status: IdentityStatus
    two_factor_enabled: bool = False
    two_factor_secret: Optional[str] = None
    two_factor_backup_codes: Optional[List[str]] = None
    last_login_at: Optional[datetime] = None

    # Domain linkage: exactly one is populated, according to domain
    pengelola_id: Optional[UUID] = None
    customer_bank_id: Optional[UUID] = None
    department: Optional[str] = None

    @classmethod
    def from_record(cls, domain: IdentityDomain, record: IdentityRecord) -> "Identity":
        return cls(
            id=record.id,
            domain=domain,
            username=record.username,
            email=record.email,
            password_hash=record.password_hash,
            full_name=record.full_name,
            role=record.role,
            status=record.status,
            two_factor_enabled=record.two_factor_enabled,
            two_factor_secret=record.two_factor_secret,
            two_factor_backup_codes=record.two_factor_backup_codes,
            last_login_at=record.last_login_at,
            pengelola_id=getattr(record, "pengelola_id", None),
            customer_bank_id=getattr(record, "customer_bank_id", None),
            department=getattr(record, "department", None),
        )

    @property
    def is_active(self) -> bool:
        return self.status == IdentityStatus.active

    def linkage_claims(self) -> Dict[str, Any]:
        """Domain linkage ids as they travel in token claims and summaries"""
        return {
            "pengelola_id": str(self.pengelola_id) if self.pengelola_id else None,
            "customer_bank_id": (
                str(self.customer_bank_id) if self.customer_bank_id else None
            ),
            "department": self.department,
        }

    def to_summary(self) -> IdentitySummary:
        return IdentitySummary(
            id=str(self.id),
            domain=self.domain,
            username=self.username,
            email=self.email,
            full_name=self.full_name,
            role=self.role,
            status=self.status,
            two_factor_enabled=self.two_factor_enabled,
            last_login_at=self.last_login_at,
            **self.linkage_claims(),
        )
