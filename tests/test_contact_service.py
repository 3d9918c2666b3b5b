"""Unit tests for ContactIntakeService."""

import logging
from io import StringIO
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy import create_engine

from app.adapters.rate_limit.in_memory import InMemoryAttemptRateLimiter
from app.adapters.storage.in_memory import InMemoryStorage
from app.adapters.storage.models import ContactSubmissionRecord
from app.adapters.storage.sql import SQLAlchemyStorage
from app.core.errors import (
    RateLimitAppError,
    StorageAppError,
    StoreUnavailableError,
    ValidationAppError,
)
from app.core.logging import JsonFormatter, RequestIdFilter, SensitiveDataFilter
from app.services.contact_service import UNKNOWN_CLIENT, ContactIntakeService

VALID = {"name": "Ann", "email": "a@b.com", "message": "Hi"}


@pytest.fixture
def service(storage: InMemoryStorage, limiter: InMemoryAttemptRateLimiter) -> ContactIntakeService:
    return ContactIntakeService(storage=storage, rate_limiter=limiter)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_valid_submission_is_stored(self, service, storage) -> None:
        stored = await service.submit("198.51.100.1", {**VALID, "company": ""})

        assert stored.id
        assert stored.company is None
        assert (await storage.get_contact_submission(stored.id)) == stored

    @pytest.mark.asyncio
    async def test_fourth_attempt_is_rate_limited(self, service, storage) -> None:
        for _ in range(3):
            await service.submit("198.51.100.1", VALID)

        with pytest.raises(RateLimitAppError) as exc_info:
            await service.submit("198.51.100.1", VALID)

        assert exc_info.value.retry_after == 60
        assert len(storage) == 3

    @pytest.mark.asyncio
    async def test_invalid_submissions_consume_attempts(self, service, storage) -> None:
        for _ in range(3):
            with pytest.raises(ValidationAppError):
                await service.submit("198.51.100.1", {"name": "Ann"})

        with pytest.raises(RateLimitAppError):
            await service.submit("198.51.100.1", VALID)
        assert len(storage) == 0

    @pytest.mark.asyncio
    async def test_rate_limit_checked_before_validation(self, service) -> None:
        for _ in range(3):
            await service.submit("198.51.100.1", VALID)

        # An invalid body from a throttled client gets 429, not 400
        with pytest.raises(RateLimitAppError):
            await service.submit("198.51.100.1", {})

    @pytest.mark.asyncio
    async def test_missing_client_id_uses_shared_bucket(self, service, limiter) -> None:
        await service.submit(None, VALID)
        await service.submit("", VALID)

        entry = limiter.get_entry(UNKNOWN_CLIENT)
        assert entry is not None
        assert entry.attempts == 2

    @pytest.mark.asyncio
    async def test_disabled_rate_limiter(self, storage) -> None:
        service = ContactIntakeService(storage=storage, rate_limiter=None)
        for _ in range(10):
            await service.submit("198.51.100.1", VALID)
        assert len(storage) == 10


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_backend_error_becomes_generic_storage_error(self, limiter) -> None:
        storage = Mock()
        storage.backend_name = "sql"
        storage.insert_contact_submission = AsyncMock(
            side_effect=RuntimeError("password authentication failed for user site")
        )
        service = ContactIntakeService(storage=storage, rate_limiter=limiter)

        with pytest.raises(StorageAppError) as exc_info:
            await service.submit("198.51.100.1", VALID)

        assert exc_info.value.message == "Internal server error"
        assert "password" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_store_unavailable_is_not_retried(self, limiter) -> None:
        storage = Mock()
        storage.backend_name = "sql"
        storage.insert_contact_submission = AsyncMock(
            side_effect=StoreUnavailableError(code="database_unavailable", message="Database not available")
        )
        service = ContactIntakeService(storage=storage, rate_limiter=limiter)

        with pytest.raises(StorageAppError):
            await service.submit("198.51.100.1", VALID)

        storage.insert_contact_submission.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_validation_failure_never_reaches_storage(self, limiter) -> None:
        storage = Mock()
        storage.insert_contact_submission = AsyncMock()
        service = ContactIntakeService(storage=storage, rate_limiter=limiter)

        with pytest.raises(ValidationAppError):
            await service.submit("198.51.100.1", {"email": "a@b.com"})

        storage.insert_contact_submission.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_insert_keeps_submission_out_of_logs(self, tmp_path, limiter) -> None:
        url = f"sqlite:///{tmp_path / 'broken.db'}"
        storage = SQLAlchemyStorage.from_url(url)
        storage.init_schema()
        engine = create_engine(url)
        ContactSubmissionRecord.__table__.drop(engine)
        engine.dispose()

        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.addFilter(RequestIdFilter())
        handler.addFilter(SensitiveDataFilter())
        handler.setFormatter(JsonFormatter())
        service_logger = logging.getLogger("app.services.contact_service")
        service_logger.addHandler(handler)

        service = ContactIntakeService(storage=storage, rate_limiter=limiter)
        submission = {
            "name": "Ann Secret",
            "email": "ann@private.example",
            "message": "call 555-0100",
        }
        try:
            with pytest.raises(StorageAppError) as exc_info:
                await service.submit("198.51.100.1", submission)
        finally:
            service_logger.removeHandler(handler)
            storage.close()

        output = stream.getvalue()
        assert "storage.insert_failed" in output
        for value in submission.values():
            assert value not in output
            assert value not in str(exc_info.value.__cause__)
