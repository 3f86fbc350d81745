"""
TOTP Service

Enrollment secrets, provisioning QR codes, code verification with clock-drift
tolerance, and one-time backup codes for two-factor authentication.
"""

import base64
import hashlib
import io
import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

import pyotp
import qrcode

from config import ApplicationConfig

TOTP_CODE_PATTERN = re.compile(r"^\d{6}$")
BACKUP_CODE_PATTERN = re.compile(r"^[A-Z0-9]{5}-[A-Z0-9]{5}$")

_BACKUP_CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class TotpSecret:
    """Freshly generated enrollment secret"""

    secret: str
    otpauth_url: str


class TotpService:
    """
    TOTP engine built on pyotp.

    Business Rules:
    - Secrets are 32 base32 characters (160 bits)
    - 6-digit codes, 30-second steps
    - Codes from the adjacent step on either side are accepted (valid_window)
    - Backup codes are XXXXX-XXXXX over [A-Z0-9]; only their hashes are stored
    """

    def __init__(
        self,
        issuer: Optional[str] = None,
        valid_window: Optional[int] = None,
        backup_code_count: Optional[int] = None,
    ):
        self.issuer = issuer or ApplicationConfig.TOTP_ISSUER
        self.valid_window = (
            ApplicationConfig.TOTP_VALID_WINDOW if valid_window is None else valid_window
        )
        self.backup_code_count = backup_code_count or ApplicationConfig.BACKUP_CODE_COUNT

    def generate_secret(self, label: str) -> TotpSecret:
        """Generate a new base32 secret and its otpauth:// provisioning URI"""
        secret = pyotp.random_base32(length=32)
        otpauth_url = pyotp.TOTP(secret).provisioning_uri(
            name=f"{self.issuer} ({label})", issuer_name=self.issuer
        )
        return TotpSecret(secret=secret, otpauth_url=otpauth_url)

    @staticmethod
    def render_qr(uri: str) -> str:
        """Encode a provisioning URI as a PNG data URL"""
        qr = qrcode.QRCode(version=1, box_size=10, border=4)
        qr.add_data(uri)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf)
        data = base64.b64encode(buf.getvalue()).decode()
        return f"data:image/png;base64,{data}"

    def verify_code(
        self,
        secret: str,
        code: str,
        for_time: Optional[Union[int, datetime]] = None,
    ) -> bool:
        """
        Verify a 6-digit code against the secret.

        Args:
            secret: Base32 TOTP secret
            code: Code entered by the user
            for_time: Unix timestamp or aware datetime to verify at (defaults to now)

        Returns:
            True if the code matches the current step or one adjacent step
        """
        if not secret or not code or not TOTP_CODE_PATTERN.match(code):
            return False
        totp = pyotp.TOTP(secret)
        return totp.verify(code, for_time=for_time, valid_window=self.valid_window)

    def generate_backup_codes(self, count: Optional[int] = None) -> List[str]:
        """Generate one-time recovery codes formatted as XXXXX-XXXXX"""
        codes = []
        for _ in range(count or self.backup_code_count):
            raw = "".join(secrets.choice(_BACKUP_CODE_ALPHABET) for _ in range(10))
            codes.append(f"{raw[:5]}-{raw[5:]}")
        return codes

    @staticmethod
    def normalize_backup_code(code: str) -> str:
        return code.strip().upper()

    @staticmethod
    def hash_backup_code(code: str) -> str:
        """SHA-256 hex digest of a normalized backup code"""
        normalized = TotpService.normalize_backup_code(code)
        return hashlib.sha256(normalized.encode()).hexdigest()
