"""Tests for BaseAPIClient and CircuitBreaker."""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
import respx
from httpx import Response

from squidmarket.core.exceptions import CircuitBreakerOpenError, ExternalServiceError
from squidmarket.services.base import BaseAPIClient, CircuitBreaker, CircuitState


class TestCircuitBreaker:
    """Tests for CircuitBreaker state transitions."""

    def test_opens_at_threshold(self) -> None:
        """
        Given: A breaker with threshold 3
        When: Three failures are recorded
        Then: The circuit is open and requests are blocked
        """
        breaker = CircuitBreaker(failure_threshold=3, cooldown_seconds=30)

        for _ in range(3):
            breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
        assert breaker.can_execute() is False
        with pytest.raises(CircuitBreakerOpenError):
            breaker.raise_if_open()

    def test_half_opens_after_cooldown(self) -> None:
        breaker = CircuitBreaker(failure_threshold=1, cooldown_seconds=30)
        breaker.record_failure()
        breaker.last_failure_time = datetime.now(UTC) - timedelta(seconds=31)

        assert breaker.can_execute() is True
        assert breaker.state == CircuitState.HALF_OPEN

    def test_failed_trial_reopens(self) -> None:
        breaker = CircuitBreaker(failure_threshold=5)
        breaker.state = CircuitState.HALF_OPEN

        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN

    def test_success_closes_and_resets(self) -> None:
        breaker = CircuitBreaker(failure_threshold=1)
        breaker.record_failure()

        breaker.record_success()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0


class TestBaseAPIClient:
    """Tests for BaseAPIClient requests."""

    def test_lazy_initialization(self) -> None:
        client = BaseAPIClient(base_url="https://api.test")

        assert client._client is None
        assert client.timeout == 30.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_client_error_is_not_counted_as_failure(self) -> None:
        respx.get("https://api.test/x").mock(return_value=Response(404))
        client = BaseAPIClient(base_url="https://api.test", max_retries=1)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get("/x")
        await client.close()

        assert exc_info.value.status_code == 404
        assert client.circuit_breaker.failure_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_open_circuit_blocks_requests(self) -> None:
        route = respx.get("https://api.test/x").mock(side_effect=httpx.ConnectError("down"))
        client = BaseAPIClient(
            base_url="https://api.test", max_retries=1, circuit_breaker_threshold=1
        )

        with pytest.raises(ExternalServiceError):
            await client.get("/x")
        with pytest.raises(CircuitBreakerOpenError):
            await client.get("/x")
        await client.close()

        assert route.call_count == 1
