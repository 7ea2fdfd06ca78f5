from typing import Optional
from uuid import UUID

from fastapi import status

from gatepass.api.error import ClientError
from gatepass.libs.result import Error


def parse_uuid(value: Optional[str], code: str, label: str) -> Optional[UUID]:
    """Parse an id from the request, 400 with ``code`` if malformed"""
    if value is None:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise ClientError(
            Error(code, f"Invalid {label} format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
