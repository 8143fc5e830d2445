"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from gpa_tracker.domain.users.repositories import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted one-way hashing with a fixed work factor.

    ``method`` is any werkzeug method string, e.g. ``"scrypt"`` or
    ``"pbkdf2:sha256:600000"``; the cost is encoded in every stored hash so
    verification keeps working if the configured method changes later.
    """

    def __init__(self, method: str = "scrypt") -> None:
        self._method = method

    def hash(self, password: str) -> str:
        return str(generate_password_hash(password, method=self._method))

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError:
            return False
