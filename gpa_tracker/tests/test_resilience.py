from __future__ import annotations

import pytest

from gpa_tracker.infrastructure.resilience import RetryPolicy, call_with_retries

NO_WAIT = RetryPolicy(max_retries=2, backoff_base=0, backoff_cap=0)


def test_call_with_retries_returns_first_success() -> None:
    attempts: list[int] = []

    def flaky() -> str:
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("reset by peer")
        return "ok"

    assert call_with_retries(flaky, policy=NO_WAIT) == "ok"
    assert len(attempts) == 3


def test_call_with_retries_reraises_last_error() -> None:
    attempts: list[int] = []

    def broken() -> None:
        attempts.append(1)
        raise ConnectionError(f"attempt {len(attempts)}")

    with pytest.raises(ConnectionError, match="attempt 3"):
        call_with_retries(broken, policy=NO_WAIT)


def test_call_with_retries_skips_unlisted_errors() -> None:
    attempts: list[int] = []

    def bad_input() -> None:
        attempts.append(1)
        raise ValueError("bad")

    with pytest.raises(ValueError):
        call_with_retries(bad_input, policy=NO_WAIT, retry_on=(ConnectionError,))
    assert len(attempts) == 1


def test_policy_from_config() -> None:
    from gpa_tracker.shared.config.settings import ResilienceConfig

    config = ResilienceConfig.model_validate(
        {"RESILIENCE_RETRIES": 5, "RESILIENCE_BACKOFF_BASE": 0.1, "RESILIENCE_BACKOFF_CAP": 1}
    )

    assert RetryPolicy.from_config(config) == RetryPolicy(5, 0.1, 1.0)
