from typing import Optional

from src.libs.result import Error
from src.app.services.totp_service import TOTP_CODE_PATTERN


def validate_totp_code(code: Optional[str]) -> Optional[Error]:
    """VALIDATION_ERROR unless code is exactly six digits"""
    if not code or not TOTP_CODE_PATTERN.match(code):
        return Error("VALIDATION_ERROR", "Code must be exactly 6 digits")
    return None
