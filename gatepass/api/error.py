from typing import NoReturn

from fastapi import status

from gatepass.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


FORBIDDEN_CODES = {
    "NOT_A_MEMBER",
    "INSUFFICIENT_ROLE",
    "ACCESS_DENIED",
    "ORGANIZATION_SUSPENDED",
    "NO_ACTIVE_MEMBERSHIP",
    "MEMBERSHIP_INACTIVE",
    "UNIT_NOT_ALLOWED",
    "CANNOT_DEACTIVATE_SELF",
}

NOT_FOUND_CODES = {
    "INVITATION_NOT_FOUND",
    "UNIT_NOT_FOUND",
    "USER_NOT_FOUND",
    "MEMBERSHIP_NOT_FOUND",
}

CONFLICT_CODES = {
    "ADMISSION_CONFLICT",
    "SHORT_CODE_CONFLICT",
    "ALREADY_MEMBER",
    "NO_PRIOR_ENTRY",
}

VALIDATION_CODES = {
    "INVALID_KIND",
    "INVALID_VISITOR_NAME",
    "INVALID_MAX_USES",
    "INVALID_VALIDITY_WINDOW",
    "INVALID_STATUS",
    "INVALID_DIRECTION",
    "INVALID_ROLE",
    "UNIT_REQUIRED",
}


def raise_error(error: Error) -> NoReturn:
    """Translate a use case error into the HTTP exception for its code"""
    if error.code in VALIDATION_CODES:
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    if error.code in FORBIDDEN_CODES:
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    if error.code in NOT_FOUND_CODES:
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code in CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    if error.code == "STORE_UNAVAILABLE":
        raise ClientError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)
