"""
Resilience policies.

A policy is anything with ``execute(operation)``, ``on_success(handler)`` and
``on_failure(handler)``. ``HttpService`` only talks to that protocol, so any
object satisfying it can be plugged in. The shipped policies are:

- ``NoopPolicy``: run the operation once,
- ``RetryPolicy``: retry with backoff, driven by tenacity,
- ``PolicyWrap`` / ``wrap()``: nest several policies, outermost first.

Handlers receive a ``PolicyEvent`` for every attempt that succeeds or fails.
"""

import time
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Tuple,
    Type,
    TypeVar,
    Union,
    runtime_checkable,
)

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from ..errors import TokenAcquisitionError

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class PolicyEvent:
    """Outcome of a single attempt made by a policy."""

    policy: str
    attempt: int
    duration_ms: int
    error: Optional[BaseException] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "policy": self.policy,
            "attempt": self.attempt,
            "durationMs": self.duration_ms,
        }
        if self.error is not None:
            data["error"] = f"{type(self.error).__name__}: {self.error}"
            status_code = getattr(self.error, "status_code", None)
            if status_code is not None:
                data["statusCode"] = status_code
        return data


PolicyHandler = Callable[[PolicyEvent], None]
Disposer = Callable[[], None]


@runtime_checkable
class ResiliencePolicy(Protocol):
    """Interface every resilience policy implements."""

    async def execute(self, operation: Operation[T]) -> T: ...

    def on_success(self, handler: PolicyHandler) -> Disposer: ...

    def on_failure(self, handler: PolicyHandler) -> Disposer: ...


class BasePolicy:
    """Handler bookkeeping shared by the shipped policies."""

    name = "policy"

    def __init__(self) -> None:
        self._success_handlers: List[PolicyHandler] = []
        self._failure_handlers: List[PolicyHandler] = []

    def on_success(self, handler: PolicyHandler) -> Disposer:
        """
        Register a handler called after every successful attempt.

        Args:
            handler: Callable receiving a PolicyEvent

        Returns:
            Callable that unregisters the handler
        """
        self._success_handlers.append(handler)
        return lambda: self._discard(self._success_handlers, handler)

    def on_failure(self, handler: PolicyHandler) -> Disposer:
        """
        Register a handler called after every failed attempt.

        Args:
            handler: Callable receiving a PolicyEvent with ``error`` set

        Returns:
            Callable that unregisters the handler
        """
        self._failure_handlers.append(handler)
        return lambda: self._discard(self._failure_handlers, handler)

    @staticmethod
    def _discard(handlers: List[PolicyHandler], handler: PolicyHandler) -> None:
        if handler in handlers:
            handlers.remove(handler)

    def _emit(self, handlers: List[PolicyHandler], event: PolicyEvent) -> None:
        for handler in list(handlers):
            handler(event)

    async def _attempt(self, operation: Operation[T], attempt: int) -> T:
        """Run one attempt and notify handlers of its outcome."""
        start_time = time.perf_counter()
        try:
            result = await operation()
        except Exception as error:
            duration_ms = int((time.perf_counter() - start_time) * 1000)
            self._emit(
                self._failure_handlers,
                PolicyEvent(self.name, attempt, duration_ms, error),
            )
            raise
        duration_ms = int((time.perf_counter() - start_time) * 1000)
        self._emit(self._success_handlers, PolicyEvent(self.name, attempt, duration_ms))
        return result

    async def execute(self, operation: Operation[T]) -> T:
        raise NotImplementedError


class NoopPolicy(BasePolicy):
    """Executes the operation exactly once."""

    name = "noop"

    async def execute(self, operation: Operation[T]) -> T:
        return await self._attempt(operation, 1)


class RetryPolicy(BasePolicy):
    """
    Retry failed operations with backoff.

    The default backoff is exponential, starting at 128ms and capped at 30s.
    Pass ``wait=tenacity.wait_none()`` to retry immediately.
    """

    name = "retry"

    def __init__(
        self,
        max_attempts: int = 3,
        wait: Optional[wait_base] = None,
        retry_on: Union[Type[BaseException], Tuple[Type[BaseException], ...]] = Exception,
        should_retry: Optional[Callable[[BaseException], bool]] = None,
    ):
        """
        Initialize retry policy.

        Args:
            max_attempts: Total number of attempts, including the first one
            wait: tenacity wait strategy between attempts
            retry_on: Exception type(s) worth retrying
            should_retry: Optional predicate overriding ``retry_on``
        """
        super().__init__()
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts
        self.wait = wait if wait is not None else wait_exponential(multiplier=0.128, max=30)
        self.retry_on = retry_on
        self.should_retry = should_retry

    def _is_retryable(self, error: BaseException) -> bool:
        if isinstance(error, TokenAcquisitionError):
            return False
        if self.should_retry is not None:
            return self.should_retry(error)
        return isinstance(error, self.retry_on)

    async def execute(self, operation: Operation[T]) -> T:
        """
        Execute ``operation``, retrying failures until attempts run out.

        Raises:
            Exception: The last error once no attempt is left, or any non-retryable error
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait,
            retry=retry_if_exception(self._is_retryable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                result = await self._attempt(operation, attempt.retry_state.attempt_number)
        return result


class PolicyWrap(BasePolicy):
    """Runs an operation through several policies, the first one outermost."""

    name = "wrap"

    def __init__(self, *policies: ResiliencePolicy):
        super().__init__()
        self.policies = policies

    @staticmethod
    def _bind(policy: ResiliencePolicy, inner: Operation[Any]) -> Operation[Any]:
        async def run() -> Any:
            return await policy.execute(inner)

        return run

    async def execute(self, operation: Operation[T]) -> T:
        call: Operation[Any] = operation
        for policy in reversed(self.policies):
            call = self._bind(policy, call)
        return await self._attempt(call, 1)


def wrap(*policies: ResiliencePolicy) -> PolicyWrap:
    """Compose ``policies`` so the first one wraps all the others."""
    return PolicyWrap(*policies)
