"""
Invitation codes.

Two ways to present an invitation at the gate: the QR payload (opaque,
``<prefix>:<invitation id>:<secret>``) or the 6-character short code typed by
the guard. Neither carries authority; both only point at a record.
"""

import re
import secrets
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .entities import AccessMethod

# No 0/O or 1/I, they are misread when typed from a phone screen
SHORT_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHORT_CODE_LENGTH = 6

_SHORT_CODE_RE = re.compile(r"^[A-Z0-9]{%d}$" % SHORT_CODE_LENGTH)


@dataclass(frozen=True)
class PresentedCode:
    """A code as handed over by the scanner or typed by the guard"""

    value: str
    is_qr: bool

    @property
    def method(self) -> AccessMethod:
        return AccessMethod.qr_scan if self.is_qr else AccessMethod.manual_code


def generate_short_code() -> str:
    return "".join(
        secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH)
    )


def build_qr_data(prefix: str, invitation_id: UUID) -> str:
    return f"{prefix}:{invitation_id}:{secrets.token_urlsafe(16)}"


def parse_code(raw: str, qr_prefix: str) -> Optional[PresentedCode]:
    """
    Classify a presented code.

    Returns:
        PresentedCode, or None if the input cannot be any invitation code
    """
    if raw is None:
        return None

    code = raw.strip()
    if code.startswith(f"{qr_prefix}:"):
        return PresentedCode(value=code, is_qr=True)

    code = code.upper()
    if _SHORT_CODE_RE.match(code):
        return PresentedCode(value=code, is_qr=False)

    return None
