import asyncio

import pytest

from blackroc.services.retry import RetryPolicy


def _scripted(*outcomes):
    calls = []

    async def operation():
        calls.append(len(calls) + 1)
        return outcomes[min(len(calls), len(outcomes)) - 1]

    return operation, calls


def test_returns_first_outcome_when_not_retryable():
    operation, calls = _scripted("ok")
    policy = RetryPolicy(max_attempts=3, retry_on=lambda o: o == "denied")

    assert asyncio.run(policy.run(operation)) == "ok"
    assert calls == [1]


def test_stops_at_max_attempts():
    operation, calls = _scripted("denied")
    policy = RetryPolicy(max_attempts=2, retry_on=lambda o: o == "denied")

    assert asyncio.run(policy.run(operation)) == "denied"
    assert calls == [1, 2]


def test_before_retry_can_abort():
    operation, calls = _scripted("denied", "ok")
    checks = []

    async def before_retry():
        checks.append(True)
        return False

    policy = RetryPolicy(max_attempts=2, retry_on=lambda o: o == "denied", before_retry=before_retry)

    assert asyncio.run(policy.run(operation)) == "denied"
    assert calls == [1]
    assert checks == [True]


def test_retry_succeeds_after_precondition_passes():
    operation, calls = _scripted("denied", "ok")

    async def before_retry():
        return True

    policy = RetryPolicy(max_attempts=2, retry_on=lambda o: o == "denied", before_retry=before_retry)

    assert asyncio.run(policy.run(operation)) == "ok"
    assert calls == [1, 2]


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0, retry_on=lambda o: True)
