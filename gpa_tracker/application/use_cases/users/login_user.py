# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from gpa_tracker.domain.records.repositories import TenantProvisioner
from gpa_tracker.domain.users.entities import User
from gpa_tracker.domain.users.exceptions import InvalidCredentialsError
from gpa_tracker.domain.users.repositories import (
    PasswordHasher,
    SessionTokenService,
    UserRepository,
)
from gpa_tracker.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: SessionTokenService,
        password_hasher: PasswordHasher,
        provisioner: TenantProvisioner,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._provisioner = provisioner
        self._dummy_hash: str | None = None

    def _burn_verify(self, password: str) -> None:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("not-a-real-password")
        self._password_hasher.verify(password, self._dummy_hash)

    def execute(self, username: str, password: str) -> tuple[User, str]:
        user = self._users.find_by_username(username)
        if user is None:
            # Same hashing cost for unknown usernames as for wrong passwords.
            self._burn_verify(password)
        password_valid = user is not None and self._password_hasher.verify(
            password, user.password_hash
        )

        if not password_valid or user is None:
            logger.info(f"users.login: rejected (username={username})")
            raise InvalidCredentialsError()

        # Heals a registration that stopped between the user insert and provisioning.
        if not self._provisioner.exists(user.tenant_name):
            self._provisioner.provision(user.tenant_name)

        token = self._tokens.issue(user.id, user.username, user.tenant_name)
        logger.info(f"users.login: ok (user_id={user.id})")
        return user, token
