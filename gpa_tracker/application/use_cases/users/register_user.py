# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from gpa_tracker.application.interfaces import NotificationPort
from gpa_tracker.domain.records.repositories import TenantProvisioner
from gpa_tracker.domain.records.tenancy import derive_tenant_name
from gpa_tracker.domain.users.entities import User
from gpa_tracker.domain.users.exceptions import UserAlreadyExistsError
from gpa_tracker.domain.users.repositories import PasswordHasher, UserRepository
from gpa_tracker.shared.errors.base import ValidationError
from gpa_tracker.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        provisioner: TenantProvisioner,
        password_hasher: PasswordHasher,
        notifications: NotificationPort,
    ) -> None:
        self._users = users
        self._provisioner = provisioner
        self._password_hasher = password_hasher
        self._notifications = notifications

    def execute(self, username: str, email: str, password: str) -> User:
        missing = [
            name
            for name, value in (("username", username), ("email", email), ("password", password))
            if not value
        ]
        if missing:
            raise ValidationError(context={"fields": missing})

        tenant_name = derive_tenant_name(username)
        # Advisory only; the unique constraints decide concurrent registrations.
        if (
            self._users.find_by_username(username)
            or self._users.find_by_email(email)
            or self._users.find_by_tenant_name(tenant_name)
        ):
            logger.info(f"users.register: duplicate (username={username})")
            raise UserAlreadyExistsError()

        hashed = self._password_hasher.hash(password)
        user = User(
            id=0,
            username=username,
            email=email,
            password_hash=hashed,
            tenant_name=tenant_name,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)
        self._provisioner.provision(persisted.tenant_name)

        if not self._notifications.send_welcome(persisted.email, persisted.username):
            logger.warning(f"users.register: welcome email not sent (user_id={persisted.id})")

        logger.info(f"users.register: ok (user_id={persisted.id}, tenant={tenant_name})")
        return persisted
