"""
Resilience executor.

Resolves which policy drives a call and, when logging is enabled, observes
each policy's attempts: debug on success, warning on failure. Observers are
registered at most once per policy instance.
"""

import logging
import weakref
from typing import Any, Dict, Optional, Union

from .policy import NoopPolicy, Operation, PolicyEvent, ResiliencePolicy, T

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class ResilienceExecutor:
    """Runs operations through the effective resilience policy."""

    def __init__(
        self,
        default_policy: Optional[ResiliencePolicy] = None,
        logger: Optional[LoggerLike] = None,
    ):
        """
        Initialize executor.

        Args:
            default_policy: Client-wide policy, used when a call brings none
            logger: Logger for policy events; None disables event logging
        """
        self.default_policy = default_policy
        self.logger = logger
        self._noop = NoopPolicy()
        # Ad hoc per-request policies drop out of the set when garbage collected
        self._observed: "weakref.WeakSet[Any]" = weakref.WeakSet()
        # policies without a __weakref__ slot are held strongly, keyed by id
        self._pinned: Dict[int, Any] = {}

    def resolve_policy(self, override: Optional[ResiliencePolicy] = None) -> ResiliencePolicy:
        """
        Pick the policy for one call.

        Args:
            override: Per-request policy

        Returns:
            The override, else the default policy, else an execute-once policy
        """
        if override is not None:
            return override
        if self.default_policy is not None:
            return self.default_policy
        return self._noop

    def _observe(self, policy: ResiliencePolicy) -> None:
        if self.logger is None or policy in self._observed or id(policy) in self._pinned:
            return

        logger = self.logger

        def log_success(event: PolicyEvent) -> None:
            logger.debug("Resilience policy attempt succeeded", extra={"data": event.to_dict()})

        def log_failure(event: PolicyEvent) -> None:
            logger.warning("Resilience policy attempt failed", extra={"data": event.to_dict()})

        policy.on_success(log_success)
        policy.on_failure(log_failure)
        try:
            self._observed.add(policy)
        except TypeError:
            self._pinned[id(policy)] = policy

    async def execute(
        self, operation: Operation[T], policy: Optional[ResiliencePolicy] = None
    ) -> T:
        """
        Execute ``operation`` through ``policy`` (resolved if None).

        Args:
            operation: Zero-argument coroutine function
            policy: Policy to use; resolved via ``resolve_policy`` when None

        Returns:
            Whatever the operation returns

        Raises:
            Exception: The operation's error once the policy gives up
        """
        effective = policy if policy is not None else self.resolve_policy()
        self._observe(effective)
        return await effective.execute(operation)
