"""
Retry policy for calls to the LLM service.

A RetryPolicy classifies an error into a named rule with a base delay; the
delay grows linearly with the attempt number. Errors no rule matches are
raised straight away.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

from . import constants as c

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryRule:
    """A class of retryable errors.

    Attributes:
        name: Label used in logs.
        matches: Predicate telling whether an error belongs to this rule.
        base_delay: Seconds to wait, multiplied by (attempt + 1).
    """

    name: str
    matches: Callable[[BaseException], bool]
    base_delay: float


@dataclass(frozen=True)
class RetryPolicy:
    rules: list[RetryRule] = field(default_factory=list)
    max_retries: int = c.LLM_MAX_RETRIES

    def rule_for(self, error: BaseException) -> Optional[RetryRule]:
        return next((rule for rule in self.rules if rule.matches(error)), None)

    def delay_for(self, error: BaseException, attempt: int) -> Optional[float]:
        """Seconds to wait before retrying after a failed attempt.

        Args:
            error: The error raised by the attempt.
            attempt: Zero-based number of the failed attempt.

        Returns:
            The delay, or None when the error must not be retried.
        """
        if attempt >= self.max_retries:
            return None
        rule = self.rule_for(error)
        if rule is None:
            return None
        return (attempt + 1) * rule.base_delay


def _status_of(error: BaseException) -> Optional[int]:
    status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def is_service_unavailable(error: BaseException) -> bool:
    if _status_of(error) == 503:
        return True
    message = str(error)
    return "503" in message or "Service Unavailable" in message


def is_rate_limited(error: BaseException) -> bool:
    if _status_of(error) == 429:
        return True
    message = str(error).lower()
    return "429" in message or "rate limit" in message or "too many requests" in message


def default_llm_policy() -> RetryPolicy:
    return RetryPolicy(
        rules=[
            RetryRule("service unavailable", is_service_unavailable, c.LLM_UNAVAILABLE_BACKOFF),
            RetryRule("rate limited", is_rate_limited, c.LLM_RATE_LIMIT_BACKOFF),
        ],
        max_retries=c.LLM_MAX_RETRIES,
    )


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await operation, retrying it as the policy allows.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt.
        policy: Decides which errors are retried and how long to wait.
        sleep: Awaitable delay, replaceable in tests.

    Returns:
        The first successful result.

    Raises:
        The last error once it is not retryable or retries are exhausted.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            delay = policy.delay_for(e, attempt)
            if delay is None:
                raise
            rule = policy.rule_for(e)
            _LOGGER.warning(
                "Attempt %d failed (%s), retrying in %.0fs: %s", attempt + 1, rule.name, delay, e
            )
            await sleep(delay)
            attempt += 1
