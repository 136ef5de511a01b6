import unittest

from chefiq_actions.llm_service import LLMServiceError
from chefiq_actions.retry import (
    RetryPolicy,
    default_llm_policy,
    is_rate_limited,
    is_service_unavailable,
    retry_async,
)


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class FlakyOperation:
    """Fails with the given errors, then returns "ok"."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class ErrorClassificationTests(unittest.TestCase):
    def test_status_codes(self) -> None:
        self.assertTrue(is_service_unavailable(LLMServiceError(503, "overloaded")))
        self.assertTrue(is_rate_limited(LLMServiceError(429, "quota")))
        self.assertFalse(is_rate_limited(LLMServiceError(503, "overloaded")))
        self.assertFalse(is_service_unavailable(LLMServiceError(400, "bad request")))

    def test_messages(self) -> None:
        self.assertTrue(is_service_unavailable(RuntimeError("503 Service Unavailable")))
        self.assertTrue(is_rate_limited(RuntimeError("Too Many Requests")))
        self.assertFalse(is_rate_limited(ValueError("not json")))

    def test_delay_grows_linearly(self) -> None:
        policy = default_llm_policy()
        error = LLMServiceError(503, "overloaded")
        self.assertEqual(policy.delay_for(error, 0), 5)
        self.assertEqual(policy.delay_for(error, 1), 10)
        self.assertIsNone(policy.delay_for(error, 2))
        self.assertIsNone(policy.delay_for(ValueError("boom"), 0))

    def test_policy_without_rules_never_retries(self) -> None:
        self.assertIsNone(RetryPolicy().delay_for(LLMServiceError(503, "x"), 0))


class RetryAsyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_service_unavailable_backoff(self) -> None:
        sleep = RecordingSleep()
        operation = FlakyOperation(LLMServiceError(503, "a"), LLMServiceError(503, "b"))
        result = await retry_async(operation, default_llm_policy(), sleep=sleep)
        self.assertEqual(result, "ok")
        self.assertEqual(operation.calls, 3)
        self.assertEqual(sleep.delays, [5, 10])

    async def test_rate_limit_backoff(self) -> None:
        sleep = RecordingSleep()
        operation = FlakyOperation(LLMServiceError(429, "a"), LLMServiceError(429, "b"))
        self.assertEqual(await retry_async(operation, default_llm_policy(), sleep=sleep), "ok")
        self.assertEqual(sleep.delays, [3, 6])

    async def test_gives_up_after_max_retries(self) -> None:
        sleep = RecordingSleep()
        operation = FlakyOperation(*(LLMServiceError(503, str(i)) for i in range(3)))
        with self.assertRaises(LLMServiceError):
            await retry_async(operation, default_llm_policy(), sleep=sleep)
        self.assertEqual(operation.calls, 3)
        self.assertEqual(sleep.delays, [5, 10])

    async def test_other_errors_are_not_retried(self) -> None:
        sleep = RecordingSleep()
        operation = FlakyOperation(ValueError("not json"))
        with self.assertRaises(ValueError):
            await retry_async(operation, default_llm_policy(), sleep=sleep)
        self.assertEqual(operation.calls, 1)
        self.assertEqual(sleep.delays, [])


if __name__ == "__main__":
    unittest.main()
