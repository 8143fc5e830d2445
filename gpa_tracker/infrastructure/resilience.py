# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retry helpers for outbound provider calls."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from gpa_tracker.shared.config.settings import ResilienceConfig
from gpa_tracker.shared.logging import logger

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_retries: int = 2
    backoff_base: float = 0.5
    backoff_cap: float = 4.0

    @classmethod
    def from_config(cls, config: ResilienceConfig) -> RetryPolicy:
        return cls(
            max_retries=config.max_retries,
            backoff_base=config.backoff_base,
            backoff_cap=config.backoff_cap,
        )


def call_with_retries(  # noqa: UP047
    func: Callable[..., T],
    *args: Any,
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Call ``func`` up to ``policy.max_retries + 1`` times with exponential backoff.

    The last exception is re-raised unchanged once attempts run out.
    """

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_retries + 1),
        wait=wait_exponential(multiplier=policy.backoff_base, max=policy.backoff_cap),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            logger.debug(
                f"resilience: attempt={attempt.retry_state.attempt_number} "
                f"func={getattr(func, '__name__', repr(func))}"
            )
            return func(*args, **kwargs)
    raise RuntimeError("resilience: reached unexpected branch")


__all__ = ["RetryPolicy", "call_with_retries"]
