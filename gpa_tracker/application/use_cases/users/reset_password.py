# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from gpa_tracker.domain.users.exceptions import (
    InvalidOrExpiredResetTokenError,
    UserNotFoundError,
)
from gpa_tracker.domain.users.repositories import (
    PasswordHasher,
    ResetTokenStore,
    UserRepository,
)
from gpa_tracker.shared.errors.base import ValidationError
from gpa_tracker.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenStore,
        password_hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, token: str, new_password: str) -> int:
        missing = [
            name
            for name, value in (("token", token), ("newPassword", new_password))
            if not value
        ]
        if missing:
            raise ValidationError(context={"fields": missing})

        entry = self._reset_tokens.get(token)
        if entry is None:
            logger.info("users.reset_password: unknown token")
            raise InvalidOrExpiredResetTokenError()
        if entry.is_expired(self._clock()):
            self._reset_tokens.delete(token)
            logger.info(f"users.reset_password: expired token (user_id={entry.user_id})")
            raise InvalidOrExpiredResetTokenError()

        user = self._users.find_by_id(entry.user_id)
        if user is None:
            self._reset_tokens.delete(token)
            logger.warning(f"users.reset_password: user gone (user_id={entry.user_id})")
            raise UserNotFoundError()

        # Claim the token before writing the new hash.
        if not self._reset_tokens.delete(token):
            raise InvalidOrExpiredResetTokenError()

        self._users.update_password_hash(user.id, self._password_hasher.hash(new_password))
        logger.info(f"users.reset_password: ok (user_id={user.id})")
        return user.id
