"""
Code Generator

Produces the identifiers handed to a visitor when an invitation is created.
"""

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from gatepass.domain.codes import build_qr_data, generate_short_code
from gatepass.libs.result import Error, Result, Return
from gatepass.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedCodes:
    invitation_id: UUID
    qr_data: str
    short_code: str


class CodeGenerator:
    """
    Business Rules:
    - Short code: 6 characters from an unambiguous uppercase alphabet
    - Short codes are unique within an organization, may repeat across them
    - Bounded regeneration on collision, then SHORT_CODE_CONFLICT
    - QR payload embeds the invitation id and a 128-bit random secret
    """

    def __init__(self, uow: UnitOfWork, qr_prefix: str, max_attempts: int = 5):
        self.uow = uow
        self.qr_prefix = qr_prefix
        self.max_attempts = max_attempts

    async def generate(self, organization_id: UUID) -> Result[GeneratedCodes]:
        """
        Generate identifiers for a new invitation. Must run inside the caller's
        open unit of work.
        """
        invitation_id = uuid4()

        for attempt in range(1, self.max_attempts + 1):
            short_code = generate_short_code()
            if not await self.uow.invitations.short_code_exists(
                organization_id, short_code
            ):
                return Return.ok(
                    GeneratedCodes(
                        invitation_id=invitation_id,
                        qr_data=build_qr_data(self.qr_prefix, invitation_id),
                        short_code=short_code,
                    )
                )
            logger.info(
                f"Short code collision in organization {organization_id} "
                f"(attempt {attempt}/{self.max_attempts})"
            )

        return Return.err(
            Error(
                "SHORT_CODE_CONFLICT",
                "Could not allocate a unique short code, please retry",
            )
        )
