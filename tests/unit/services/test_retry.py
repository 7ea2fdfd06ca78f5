from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from gatepass.app.services.retry import StoreUnavailableError, with_store_retry


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


@pytest.mark.asyncio
async def test_returns_first_success():
    operation = AsyncMock(return_value="done")

    assert await with_store_retry(operation, attempts=3, base_delay=0) == "done"
    operation.assert_called_once()


@pytest.mark.asyncio
async def test_retries_transient_failures():
    operation = AsyncMock(side_effect=[_operational_error(), _operational_error(), "done"])

    assert await with_store_retry(operation, attempts=3, base_delay=0) == "done"
    assert operation.call_count == 3


@pytest.mark.asyncio
async def test_raises_store_unavailable_after_last_attempt():
    operation = AsyncMock(side_effect=_operational_error())

    with pytest.raises(StoreUnavailableError):
        await with_store_retry(operation, attempts=2, base_delay=0)
    assert operation.call_count == 2


@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    operation = AsyncMock(
        side_effect=IntegrityError("INSERT", {}, Exception("unique constraint"))
    )

    with pytest.raises(IntegrityError):
        await with_store_retry(operation, attempts=3, base_delay=0)
    operation.assert_called_once()
