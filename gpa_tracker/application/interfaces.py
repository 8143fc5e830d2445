# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol


class NotificationPort(Protocol):
    """Outbound e-mail channel. Returns False when the message was not delivered."""

    def send_welcome(self, to_email: str, username: str) -> bool: ...

    def send_password_reset(self, to_email: str, username: str, token: str) -> bool: ...
