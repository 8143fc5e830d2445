from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from gpa_tracker.application.use_cases.users.login_user import LoginUserUseCase
from gpa_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from gpa_tracker.domain.users.entities import SessionClaims, User
from gpa_tracker.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from gpa_tracker.domain.users.repositories import PasswordHasher, SessionTokenService, UserRepository
from gpa_tracker.shared.errors.base import ValidationError


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def _find(self, **criteria) -> User | None:
        for user in self._users.values():
            if all(getattr(user, key) == value for key, value in criteria.items()):
                return user
        return None

    def find_by_username(self, username: str) -> User | None:
        return self._find(username=username)

    def find_by_email(self, email: str) -> User | None:
        return self._find(email=email)

    def find_by_tenant_name(self, tenant_name: str) -> User | None:
        return self._find(tenant_name=tenant_name)

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def add(self, user: User) -> User:
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        user = self._users.get(user_id)
        if user is None:
            return False
        self._users[user_id] = replace(user, password_hash=password_hash)
        return True


class InMemoryProvisioner:
    def __init__(self) -> None:
        self.stores: set[str] = set()

    def exists(self, tenant: str) -> bool:
        return tenant in self.stores

    def provision(self, tenant: str) -> bool:
        if tenant in self.stores:
            return False
        self.stores.add(tenant)
        return True


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeTokens(SessionTokenService):
    def issue(self, user_id: int, username: str, tenant: str) -> str:
        return f"token-{user_id}-{tenant}"

    def validate(self, token: str | None) -> SessionClaims:
        now = datetime.now(UTC)
        return SessionClaims(1, "alice", "user_alice_data", now, now + timedelta(hours=1))


class RecordingNotifier:
    def __init__(self, *, succeed: bool = True) -> None:
        self.welcomed: list[tuple[str, str]] = []
        self.resets: list[tuple[str, str, str]] = []
        self._succeed = succeed

    def send_welcome(self, to_email: str, username: str) -> bool:
        self.welcomed.append((to_email, username))
        return self._succeed

    def send_password_reset(self, to_email: str, username: str, token: str) -> bool:
        self.resets.append((to_email, username, token))
        return self._succeed


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def provisioner() -> InMemoryProvisioner:
    return InMemoryProvisioner()


def _register(users, provisioner, notifier=None) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        users=users,
        provisioner=provisioner,
        password_hasher=DeterministicHasher(),
        notifications=notifier or RecordingNotifier(),
    )


def _login(users, provisioner) -> LoginUserUseCase:
    return LoginUserUseCase(
        users=users,
        tokens=FakeTokens(),
        password_hasher=DeterministicHasher(),
        provisioner=provisioner,
    )


def test_register_user_success(users, provisioner) -> None:
    notifier = RecordingNotifier()
    user = _register(users, provisioner, notifier).execute("alice", "a@x.io", "pw1")

    assert user.id == 1
    assert user.tenant_name == "user_alice_data"
    assert user.password_hash == "hashed:pw1"
    assert provisioner.exists("user_alice_data")
    assert notifier.welcomed == [("a@x.io", "alice")]


def test_register_user_duplicate_username_raises(users, provisioner) -> None:
    use_case = _register(users, provisioner)
    use_case.execute("alice", "a@x.io", "pw1")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("alice", "other@x.io", "pw2")


def test_register_user_duplicate_email_raises(users, provisioner) -> None:
    use_case = _register(users, provisioner)
    use_case.execute("alice", "a@x.io", "pw1")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("bob", "a@x.io", "pw2")


def test_register_user_colliding_tenant_name_raises(users, provisioner) -> None:
    use_case = _register(users, provisioner)
    use_case.execute("a.b", "ab@x.io", "pw1")

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("a_b", "a_b@x.io", "pw2")


def test_register_user_missing_fields(users, provisioner) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _register(users, provisioner).execute("alice", "", "")

    assert excinfo.value.context == {"fields": ["email", "password"]}
    assert users.find_by_username("alice") is None


def test_register_user_survives_failed_welcome_email(users, provisioner) -> None:
    user = _register(users, provisioner, RecordingNotifier(succeed=False)).execute(
        "alice", "a@x.io", "pw1"
    )

    assert users.find_by_id(user.id) is not None


def test_login_user_success(users, provisioner) -> None:
    _register(users, provisioner).execute("alice", "a@x.io", "secret123")

    user, token = _login(users, provisioner).execute("alice", "secret123")

    assert user.username == "alice"
    assert token == "token-1-user_alice_data"


def test_login_user_invalid_credentials(users, provisioner) -> None:
    _register(users, provisioner).execute("alice", "a@x.io", "secret123")

    with pytest.raises(InvalidCredentialsError):
        _login(users, provisioner).execute("alice", "wrong")


def test_login_unknown_user_matches_wrong_password(users, provisioner) -> None:
    with pytest.raises(InvalidCredentialsError) as excinfo:
        _login(users, provisioner).execute("nobody", "whatever")

    assert excinfo.value.to_dict() == {"error": "invalid_credentials"}


def test_login_provisions_missing_tenant_store(users, provisioner) -> None:
    _register(users, provisioner).execute("alice", "a@x.io", "secret123")
    provisioner.stores.clear()

    _login(users, provisioner).execute("alice", "secret123")

    assert provisioner.exists("user_alice_data")
