"""
Circuit breaker policy.

After ``failureThreshold`` consecutive failures the circuit opens and calls
fail fast with ``BrokenCircuitError``. Once ``resetTimeout`` seconds have
passed a single trial call is let through (half-open); success closes the
circuit again, failure re-opens it.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..errors import BrokenCircuitError, TokenAcquisitionError
from ..models.config import CircuitBreakerConfig
from .policy import BasePolicy, Operation, T

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerPolicy(BasePolicy):
    """Fail fast while the endpoint keeps failing."""

    name = "circuit_breaker"

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        should_count: Optional[Callable[[BaseException], bool]] = None,
    ):
        """
        Initialize circuit breaker.

        Args:
            config: Thresholds (defaults: 3 failures, 60 seconds)
            should_count: Predicate deciding which errors count as failures
        """
        super().__init__()
        config = config or CircuitBreakerConfig()
        self.failure_threshold = config.failureThreshold
        self.reset_timeout = config.resetTimeout
        self.should_count = should_count
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        self.opened_at: Optional[float] = None
        self._trial_in_flight = False

    def get_state(self) -> CircuitState:
        return self.state

    def is_open(self) -> bool:
        """
        Check whether calls are currently rejected.

        Moves an open circuit to HALF_OPEN once the reset timeout elapsed. While
        half-open, the first caller gets the trial slot and every other caller
        is rejected until that trial settles.
        """
        if self.state == CircuitState.OPEN:
            assert self.opened_at is not None
            if time.monotonic() - self.opened_at < self.reset_timeout:
                return True
            self.state = CircuitState.HALF_OPEN
            logger.debug("Circuit half-open, allowing a trial call")

        if self.state == CircuitState.HALF_OPEN:
            if self._trial_in_flight:
                return True
            self._trial_in_flight = True
        return False

    def record_success(self) -> None:
        if self.state != CircuitState.CLOSED:
            logger.debug("Circuit closed")
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        self.opened_at = None
        self._trial_in_flight = False

    def record_failure(self) -> None:
        self.failure_count += 1
        self._trial_in_flight = False
        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                logger.warning(
                    "Circuit opened",
                    extra={"data": {"failureCount": self.failure_count}},
                )
            self.state = CircuitState.OPEN
            self.opened_at = time.monotonic()

    def reset(self) -> None:
        """Force the circuit back to CLOSED."""
        self.record_success()

    def _counts(self, error: BaseException) -> bool:
        if isinstance(error, TokenAcquisitionError):
            return False
        return self.should_count is None or self.should_count(error)

    async def execute(self, operation: Operation[T]) -> T:
        """
        Execute ``operation`` unless the circuit is open.

        Raises:
            BrokenCircuitError: If the circuit is open or a half-open trial is running
        """
        if self.is_open():
            raise BrokenCircuitError("Circuit is open, call rejected")

        is_trial = self.state == CircuitState.HALF_OPEN
        try:
            result = await self._attempt(operation, 1)
        except Exception as error:
            if self._counts(error):
                self.record_failure()
            raise
        finally:
            # uncounted errors and cancellation hand the trial slot back
            if is_trial and self.state == CircuitState.HALF_OPEN:
                self._trial_in_flight = False
        self.record_success()
        return result
