# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    password_hash: str
    tenant_name: str
    created_at: datetime

    def public_profile(self) -> dict[str, object]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(slots=True, frozen=True)
class SessionClaims:
    """Identity and tenant routing carried by a signed session token."""

    user_id: int
    username: str
    tenant: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class ResetToken:

    token: str
    user_id: int
    email: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
