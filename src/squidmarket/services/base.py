"""Base API client with circuit breaker protection.

Provides:
- CircuitState / CircuitBreaker for short-circuiting a failing upstream
- BaseAPIClient, a lazily created httpx client with bounded retries

The discovery path never retries (every failure degrades to a default),
so clients in this package are built with ``max_retries=1``.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import httpx
import structlog

from squidmarket.core.exceptions import CircuitBreakerOpenError, ExternalServiceError

log = structlog.get_logger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Requests allowed
    OPEN = "open"  # Requests blocked
    HALF_OPEN = "half_open"  # One trial request allowed


@dataclass
class CircuitBreaker:
    """Opens after ``failure_threshold`` consecutive failures.

    After ``cooldown_seconds`` a single trial request is let through;
    its outcome closes or reopens the circuit.
    """

    failure_threshold: int = 5
    cooldown_seconds: int = 30
    failure_count: int = field(default=0, init=False)
    last_failure_time: datetime | None = field(default=None, init=False)
    state: CircuitState = field(default=CircuitState.CLOSED, init=False)

    def record_success(self) -> None:
        """Reset failure count and close the circuit."""
        if self.state != CircuitState.CLOSED:
            log.info("circuit_breaker_closed", previous_state=self.state.value)
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        """Count a failure, opening the circuit at the threshold."""
        self.failure_count += 1
        self.last_failure_time = datetime.now(UTC)

        if self.state == CircuitState.HALF_OPEN:
            self.state = CircuitState.OPEN
            log.warning("circuit_breaker_reopened", failure_count=self.failure_count)
        elif self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                log.warning(
                    "circuit_breaker_opened",
                    failure_count=self.failure_count,
                    threshold=self.failure_threshold,
                )
            self.state = CircuitState.OPEN

    def can_execute(self) -> bool:
        """Check whether a request may be sent now.

        An OPEN circuit whose cooldown has elapsed moves to HALF_OPEN.
        """
        if self.state != CircuitState.OPEN:
            return True

        if self.last_failure_time is None:
            return False

        elapsed = datetime.now(UTC) - self.last_failure_time
        if elapsed > timedelta(seconds=self.cooldown_seconds):
            self.state = CircuitState.HALF_OPEN
            log.info("circuit_breaker_half_open", cooldown_elapsed=elapsed.total_seconds())
            return True
        return False

    def raise_if_open(self) -> None:
        """Raise CircuitBreakerOpenError when requests are blocked."""
        if not self.can_execute():
            raise CircuitBreakerOpenError(
                f"Circuit breaker is open. Next retry in "
                f"{self.seconds_until_half_open():.1f} seconds."
            )

    def seconds_until_half_open(self) -> float:
        """Seconds left before a trial request is allowed."""
        if self.last_failure_time is None:
            return 0.0
        elapsed = datetime.now(UTC) - self.last_failure_time
        return max(0.0, self.cooldown_seconds - elapsed.total_seconds())


class BaseAPIClient:
    """Async HTTP client with circuit breaker and optional retries.

    Attributes:
        base_url: Base URL for all requests.
        timeout: Request timeout in seconds.
        headers: Default headers for all requests.
        max_retries: Attempts per request (1 means no retry).

    Example:
        client = BaseAPIClient(base_url="https://rpc.example.org", max_retries=1)
        response = await client.post("", json=payload)
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_cooldown: int = 30,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.headers = headers or {}
        self.max_retries = max_retries
        self._client: httpx.AsyncClient | None = None
        self._circuit_breaker = CircuitBreaker(
            failure_threshold=circuit_breaker_threshold,
            cooldown_seconds=circuit_breaker_cooldown,
        )

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        """Circuit breaker guarding this client."""
        return self._circuit_breaker

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", base_url=self.base_url)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request through the circuit breaker.

        Raises:
            CircuitBreakerOpenError: If the circuit is open.
            ExternalServiceError: On 4xx, or when all attempts fail.
        """
        self._circuit_breaker.raise_if_open()

        client = await self._get_client()
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                self._circuit_breaker.record_success()
                return response

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code

                # 4xx other than 429 is the caller's fault, not the upstream's
                if 400 <= status_code < 500 and status_code != 429:
                    log.warning(
                        "request_client_error",
                        method=method,
                        path=path,
                        status_code=status_code,
                    )
                    raise ExternalServiceError(
                        service=self.base_url,
                        message=str(e),
                        status_code=status_code,
                    ) from e

                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_server_error",
                    method=method,
                    path=path,
                    status_code=status_code,
                    attempt=attempt + 1,
                )

            except httpx.RequestError as e:
                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_connection_error",
                    method=method,
                    path=path,
                    error=str(e) or type(e).__name__,
                    attempt=attempt + 1,
                )

            if attempt < self.max_retries - 1:
                await asyncio.sleep(min(2**attempt, 4))

        raise ExternalServiceError(
            service=self.base_url,
            message=f"Request failed after {self.max_retries} attempt(s): {last_error}",
        )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self._request("POST", path, **kwargs)
