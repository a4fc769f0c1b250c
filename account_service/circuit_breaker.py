"""Circuit breaker guarding calls to remote collaborators."""

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from .errors import ServiceUnavailableError
from .logging_config import get_logger

T = TypeVar("T")

logger = get_logger("account_service.circuit_breaker")


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failure threshold exceeded
    HALF_OPEN = "half_open"  # Probing whether the service recovered


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration."""

    failure_threshold: int = 5  # Consecutive failures before opening
    success_threshold: int = 1  # Successful probes needed to close from half-open
    reset_timeout: float = 60.0  # Seconds to wait before a half-open probe
    tripping_exceptions: Tuple[Type[Exception], ...] = (ServiceUnavailableError,)


class CircuitOpenError(ServiceUnavailableError):
    """Raised when a call is rejected because the circuit is open."""
    pass


class CircuitBreaker:
    """
    Circuit breaker for protecting against cascading failures.

    States:
    - CLOSED: Normal operation, calls pass through
    - OPEN: Too many failures, calls rejected immediately
    - HALF_OPEN: One probe call allowed to test recovery

    Only exceptions listed in ``tripping_exceptions`` count as failures;
    anything else propagates without touching the state.
    """

    def __init__(self, name: str, config: Optional[CircuitBreakerConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.last_failure_time: Optional[float] = None
        self._clock = clock
        self._lock = asyncio.Lock()
        self._half_open_call_in_progress = False

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state == CircuitState.CLOSED

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitOpenError: If the circuit is open or a probe is in flight
        """
        async with self._lock:
            if self.state == CircuitState.OPEN:
                if self._should_attempt_reset():
                    self.state = CircuitState.HALF_OPEN
                    self.success_count = 0
                    self._half_open_call_in_progress = False
                else:
                    raise CircuitOpenError(f"{self.name} unavailable (circuit open)")

            if self.state == CircuitState.HALF_OPEN:
                if self._half_open_call_in_progress:
                    raise CircuitOpenError(f"{self.name} unavailable (probe in progress)")
                self._half_open_call_in_progress = True

        try:
            result = await func()
        except self.config.tripping_exceptions:
            async with self._lock:
                self._on_failure()
                self._half_open_call_in_progress = False
            raise
        except BaseException:
            async with self._lock:
                self._half_open_call_in_progress = False
            raise

        async with self._lock:
            self._on_success()
            self._half_open_call_in_progress = False
        return result

    def _on_success(self) -> None:
        self.failure_count = 0

        if self.state == CircuitState.HALF_OPEN:
            self.success_count += 1
            if self.success_count >= self.config.success_threshold:
                self.state = CircuitState.CLOSED
                self.success_count = 0
                logger.info("Circuit %s closed", self.name)

    def _on_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = self._clock()

        if self.state == CircuitState.HALF_OPEN:
            self.state = CircuitState.OPEN
            logger.warning("Circuit %s re-opened after failed probe", self.name)
        elif self.failure_count >= self.config.failure_threshold:
            self.state = CircuitState.OPEN
            logger.warning(
                "Circuit %s opened after %d consecutive failures",
                self.name, self.failure_count
            )

    def _should_attempt_reset(self) -> bool:
        if self.last_failure_time is None:
            return True

        return (self._clock() - self.last_failure_time) >= self.config.reset_timeout

    async def reset(self) -> None:
        """Manually reset circuit breaker to closed state."""
        async with self._lock:
            self.state = CircuitState.CLOSED
            self.failure_count = 0
            self.success_count = 0
            self.last_failure_time = None
