"""Tests for the exponential backoff retry policy."""

import pytest

from github_monitor.errors import UpstreamFetchError
from github_monitor.services.retry import RetryPolicy
from tests.helpers import SleepRecorder


def test_default_delays() -> None:
    policy = RetryPolicy()

    assert policy.delays() == [2.0, 4.0]
    assert policy.total_backoff() == 6.0


def test_single_attempt_has_no_backoff() -> None:
    assert RetryPolicy(max_attempts=1).delays() == []


@pytest.mark.parametrize(
    "kwargs", [{"max_attempts": 0}, {"base_delay": -1.0}, {"multiplier": 0.5}]
)
def test_invalid_policy_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


@pytest.mark.anyio
async def test_run_returns_first_success() -> None:
    sleep = SleepRecorder()
    calls = []

    async def operation() -> str:
        calls.append(1)
        return "ok"

    assert await RetryPolicy().run(operation, sleep=sleep) == "ok"
    assert len(calls) == 1
    assert sleep.delays == []


@pytest.mark.anyio
async def test_run_gives_up_after_max_attempts() -> None:
    """Three attempts, 2s + 4s of backoff, then the last error surfaces."""
    sleep = SleepRecorder()
    attempts = []

    async def operation() -> None:
        attempts.append(len(attempts) + 1)
        raise UpstreamFetchError(f"failure {len(attempts)}")

    with pytest.raises(UpstreamFetchError, match="failure 3"):
        await RetryPolicy().run(operation, retry_on=(UpstreamFetchError,), sleep=sleep)

    assert attempts == [1, 2, 3]
    assert sleep.delays == [2.0, 4.0]
    assert sum(sleep.delays) == 6.0


@pytest.mark.anyio
async def test_run_does_not_retry_unlisted_errors() -> None:
    sleep = SleepRecorder()
    attempts = []

    async def operation() -> None:
        attempts.append(1)
        raise KeyError("boom")

    with pytest.raises(KeyError):
        await RetryPolicy().run(operation, retry_on=(UpstreamFetchError,), sleep=sleep)

    assert len(attempts) == 1
    assert sleep.delays == []


@pytest.mark.anyio
async def test_run_recovers_after_failure() -> None:
    sleep = SleepRecorder()
    outcomes = iter([UpstreamFetchError("flaky"), "done"])

    async def operation() -> str:
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    result = await RetryPolicy(base_delay=0.5, multiplier=3.0).run(operation, sleep=sleep)

    assert result == "done"
    assert sleep.delays == [0.5]
