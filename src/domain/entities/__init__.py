"""
Auth Service Domain Entities

All domain entities organized by model.
"""

from .enums import (
    IdentityDomain,
    IdentityStatus,
    HitachiRole,
    HitachiDepartment,
    PengelolaRole,
    BankRole,
)

from .identity import (
    IdentityRecord,
    HitachiUser,
    PengelolaUser,
    BankUser,
    Identity,
    IdentitySummary,
    IDENTITY_MODELS,
    LOGIN_DOMAIN_ORDER,
)
from .refresh_token import RefreshToken, hash_refresh_token

__all__ = [
    # Enums
    "IdentityDomain",
    "IdentityStatus",
    "HitachiRole",
    "HitachiDepartment",
    "PengelolaRole",
    "BankRole",
    # Entities
    "IdentityRecord",
    "HitachiUser",
    "PengelolaUser",
    "BankUser",
    "RefreshToken",
    # Descriptors
    "Identity",
    "IdentitySummary",
    # Registries
    "IDENTITY_MODELS",
    "LOGIN_DOMAIN_ORDER",
    "hash_refresh_token",
]
