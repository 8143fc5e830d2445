# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from gpa_tracker.application.interfaces import NotificationPort
from gpa_tracker.domain.users.entities import ResetToken
from gpa_tracker.domain.users.repositories import ResetTokenStore, UserRepository
from gpa_tracker.shared.errors.base import ValidationError
from gpa_tracker.shared.logging import logger

RESET_TOKEN_BYTES = 32
GENERIC_RESET_MESSAGE = (
    "If an account exists with that email, password reset instructions have been sent."
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RequestPasswordResetUseCase:
    """Issues a single-use reset token for a known e-mail address.

    The return value never depends on whether the address is registered.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenStore,
        notifications: NotificationPort,
        token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._notifications = notifications
        self._token_ttl = token_ttl
        self._clock = clock

    def execute(self, email: str) -> str:
        if not email:
            raise ValidationError(context={"fields": ["email"]})

        user = self._users.find_by_email(email)
        if user is None:
            logger.info("users.reset_request: no matching account")
            return GENERIC_RESET_MESSAGE

        token = ResetToken(
            token=secrets.token_hex(RESET_TOKEN_BYTES),
            user_id=user.id,
            email=user.email,
            expires_at=self._clock() + self._token_ttl,
        )
        self._reset_tokens.put(token)

        if not self._notifications.send_password_reset(user.email, user.username, token.token):
            logger.warning(f"users.reset_request: reset email not sent (user_id={user.id})")
        else:
            logger.info(
                f"users.reset_request: ok (user_id={user.id}, "
                f"expires_at={token.expires_at.isoformat()})"
            )
        return GENERIC_RESET_MESSAGE
