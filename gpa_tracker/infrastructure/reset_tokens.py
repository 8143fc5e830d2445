# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime
from threading import Lock

from gpa_tracker.domain.users.entities import ResetToken
from gpa_tracker.domain.users.repositories import ResetTokenStore
from gpa_tracker.infrastructure.observability import RESET_TOKENS_GAUGE
from gpa_tracker.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryResetTokenStore(ResetTokenStore):
    """Process-local reset tokens; lost on restart."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._store: dict[str, ResetToken] = {}

    def put(self, token: ResetToken) -> None:
        with self._lock:
            self._store[token.token] = token

    def get(self, token: str) -> ResetToken | None:
        with self._lock:
            return self._store.get(token)

    def delete(self, token: str) -> bool:
        with self._lock:
            return self._store.pop(token, None) is not None

    def sweep(self, now: datetime) -> int:
        with self._lock:
            expired = [key for key, entry in self._store.items() if entry.is_expired(now)]
            for key in expired:
                del self._store[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class ResetTokenSweeper:
    """Background thread that drops expired reset tokens every ``interval`` seconds."""

    def __init__(
        self,
        store: ResetTokenStore,
        *,
        interval: float = 60.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._interval = interval
        self._clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        removed = self._store.sweep(self._clock())
        RESET_TOKENS_GAUGE.set(len(self._store))
        if removed:
            logger.debug(
                f"reset_tokens.sweep: removed {removed} expired, {len(self._store)} still active"
            )
        return removed

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.run_once()
            except Exception:
                logger.exception("reset_tokens.sweep: failed")

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._run, name="reset-token-sweeper", daemon=True
            )
            self._thread.start()
        logger.info(f"reset_tokens.sweeper: started (interval={self._interval}s)")

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop.set()
        if thread is not None:
            thread.join(timeout)
            logger.info("reset_tokens.sweeper: stopped")


__all__ = ["InMemoryResetTokenStore", "ResetTokenSweeper"]
