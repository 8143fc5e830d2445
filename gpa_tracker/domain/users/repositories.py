# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import ResetToken, SessionClaims, User


class UserRepository(Protocol):
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_tenant_name(self, tenant_name: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...
    def update_password_hash(self, user_id: int, password_hash: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class SessionTokenService(Protocol):
    def issue(self, user_id: int, username: str, tenant: str) -> str: ...
    def validate(self, token: str | None) -> SessionClaims: ...


class ResetTokenStore(Protocol):
    def put(self, token: ResetToken) -> None: ...
    def get(self, token: str) -> ResetToken | None: ...
    def delete(self, token: str) -> bool: ...
    def sweep(self, now: datetime) -> int: ...
    def __len__(self) -> int: ...
