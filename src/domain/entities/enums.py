"""
Auth Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class IdentityDomain(str, Enum):
    """Principal category; each domain has its own table and username namespace"""

    hitachi = "HITACHI"
    pengelola = "PENGELOLA"
    bank = "BANK"


class IdentityStatus(str, Enum):
    """Identity account status"""

    active = "ACTIVE"
    inactive = "INACTIVE"


class HitachiRole(str, Enum):
    """Role of a Hitachi repair-center user"""

    super_admin = "SUPER_ADMIN"
    rc_manager = "RC_MANAGER"
    rc_staff = "RC_STAFF"


class HitachiDepartment(str, Enum):
    """Department of a Hitachi user"""

    management = "MANAGEMENT"
    repair_center = "REPAIR_CENTER"
    logistics = "LOGISTICS"


class PengelolaRole(str, Enum):
    """Role of a cash-management vendor (pengelola) user"""

    admin = "ADMIN"
    supervisor = "SUPERVISOR"
    technician = "TECHNICIAN"


class BankRole(str, Enum):
    """Role of a customer bank user"""

    admin = "ADMIN"
    viewer = "VIEWER"
