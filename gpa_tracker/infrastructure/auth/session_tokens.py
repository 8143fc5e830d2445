# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from gpa_tracker.domain.exceptions import InvariantViolation
from gpa_tracker.domain.records.tenancy import validate_tenant_name
from gpa_tracker.domain.users.entities import SessionClaims
from gpa_tracker.domain.users.exceptions import InvalidSessionTokenError, UnauthenticatedError
from gpa_tracker.domain.users.repositories import SessionTokenService
from gpa_tracker.shared.logging import logger

_REQUIRED_CLAIMS = ["sub", "username", "tenant", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtSessionTokenService(SessionTokenService):
    """Stateless signed session tokens.

    A token is valid while its signature checks out and ``exp`` lies in the
    future; nothing is stored server-side, so there is no revocation.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, user_id: int, username: str, tenant: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "username": username,
            "tenant": validate_tenant_name(tenant),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def validate(self, token: str | None) -> SessionClaims:
        if not token:
            raise UnauthenticatedError()

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False},
            )
        except jwt.InvalidTokenError as exc:
            logger.info(f"auth.token: rejected ({type(exc).__name__})")
            raise InvalidSessionTokenError() from exc

        try:
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            claims = SessionClaims(
                user_id=int(payload["sub"]),
                username=str(payload["username"]),
                tenant=validate_tenant_name(payload["tenant"]),
                issued_at=issued_at,
                expires_at=expires_at,
            )
        except (InvariantViolation, TypeError, ValueError, OverflowError) as exc:
            logger.info("auth.token: rejected (malformed claims)")
            raise InvalidSessionTokenError() from exc

        if expires_at <= self._clock():
            logger.info(f"auth.token: rejected (expired, user_id={claims.user_id})")
            raise InvalidSessionTokenError()
        return claims
