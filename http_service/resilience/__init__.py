"""Resilience policies and the executor that drives them."""

from .circuit_breaker import CircuitBreakerPolicy, CircuitState
from .executor import ResilienceExecutor
from .policy import (
    BasePolicy,
    NoopPolicy,
    PolicyEvent,
    PolicyWrap,
    ResiliencePolicy,
    RetryPolicy,
    wrap,
)

__all__ = [
    "BasePolicy",
    "CircuitBreakerPolicy",
    "CircuitState",
    "NoopPolicy",
    "PolicyEvent",
    "PolicyWrap",
    "ResilienceExecutor",
    "ResiliencePolicy",
    "RetryPolicy",
    "wrap",
]
