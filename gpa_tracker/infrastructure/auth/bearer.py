# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps
from typing import Protocol

from flask import g, request

from gpa_tracker.domain.users.repositories import SessionTokenService
from gpa_tracker.shared.logging import logger


class _HasSessionTokens(Protocol):
    session_tokens: SessionTokenService


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def bearer_required(f):
    """Validate the bearer token before running a controller method.

    The wrapped method receives the validated claims as ``claims``; it is the
    only source of the tenant store a request may touch.
    """

    @wraps(f)
    def inner(self: _HasSessionTokens, *a, **kw):
        token = bearer_token()
        if not token:
            logger.warning(
                f"No bearer token on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
        claims = self.session_tokens.validate(token)
        g.user_id = claims.user_id
        kw["claims"] = claims
        logger.debug(f"Auth OK: user={claims.user_id} {request.method} {request.path}")
        return f(self, *a, **kw)

    return inner
