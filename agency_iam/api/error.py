from fastapi import status

from agency_iam.app.errors import CONFLICT, DENIED, UNAVAILABLE, VALIDATION_ERROR
from agency_iam.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Denials are reported as missing rows
ERROR_STATUS = {
    DENIED: status.HTTP_404_NOT_FOUND,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    "INVALID_STATUS_TRANSITION": status.HTTP_409_CONFLICT,
    CONFLICT: status.HTTP_409_CONFLICT,
    UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DOCUMENT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def http_error(error: Error) -> Exception:
    """Map a use case Error to the exception the handlers render"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        return ServerError(error)
    return ClientError(error, status_code=status_code)
