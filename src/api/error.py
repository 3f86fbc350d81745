from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Error code -> HTTP status for use case failures
ERROR_STATUS = {
    "AUTHENTICATION_FAILED": status.HTTP_401_UNAUTHORIZED,
    "IDENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TWO_FACTOR_NOT_INITIATED": status.HTTP_409_CONFLICT,
    "TWO_FACTOR_ALREADY_ENABLED": status.HTTP_409_CONFLICT,
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def raise_for_error(error: Error):
    """Raise ClientError for known codes, ServerError otherwise"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
