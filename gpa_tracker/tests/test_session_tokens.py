from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from gpa_tracker.domain.users.exceptions import InvalidSessionTokenError, UnauthenticatedError
from gpa_tracker.infrastructure.auth import JwtSessionTokenService

SECRET = "unit-test-secret-key-that-is-long-enough"
NOW = datetime(2025, 1, 1, tzinfo=UTC)


class Clock:
    def __init__(self) -> None:
        self.now = NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> Clock:
    return Clock()


@pytest.fixture()
def service(clock: Clock) -> JwtSessionTokenService:
    return JwtSessionTokenService(secret_key=SECRET, ttl=timedelta(hours=24), clock=clock)


def test_issue_then_validate_returns_claims(service: JwtSessionTokenService) -> None:
    token = service.issue(7, "alice", "user_alice_data")

    claims = service.validate(token)

    assert claims.user_id == 7
    assert claims.username == "alice"
    assert claims.tenant == "user_alice_data"
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_missing_token_is_unauthenticated(service: JwtSessionTokenService) -> None:
    with pytest.raises(UnauthenticatedError):
        service.validate("")
    with pytest.raises(UnauthenticatedError):
        service.validate(None)


def test_expired_token_is_rejected(service: JwtSessionTokenService, clock: Clock) -> None:
    token = service.issue(7, "alice", "user_alice_data")
    clock.now = NOW + timedelta(hours=24)

    with pytest.raises(InvalidSessionTokenError):
        service.validate(token)


def test_token_signed_with_other_secret_is_rejected(service: JwtSessionTokenService) -> None:
    other = JwtSessionTokenService(secret_key="another-secret-key-that-is-long-enough")
    token = other.issue(7, "alice", "user_alice_data")

    with pytest.raises(InvalidSessionTokenError):
        service.validate(token)


def test_garbage_token_is_rejected(service: JwtSessionTokenService) -> None:
    with pytest.raises(InvalidSessionTokenError):
        service.validate("not-a-jwt")


def test_tenant_claim_outside_allow_list_is_rejected(service: JwtSessionTokenService) -> None:
    token = jwt.encode(
        {
            "sub": "7",
            "username": "alice",
            "tenant": "user_alice_data; DROP TABLE users",
            "iat": int(NOW.timestamp()),
            "exp": int((NOW + timedelta(hours=1)).timestamp()),
        },
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidSessionTokenError):
        service.validate(token)


def test_token_without_required_claims_is_rejected(service: JwtSessionTokenService) -> None:
    token = jwt.encode({"sub": "7"}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidSessionTokenError):
        service.validate(token)
