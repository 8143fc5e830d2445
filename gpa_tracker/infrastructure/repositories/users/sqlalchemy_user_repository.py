# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from gpa_tracker.domain.users.entities import User as DomainUser
from gpa_tracker.domain.users.exceptions import UserAlreadyExistsError
from gpa_tracker.domain.users.repositories import UserRepository
from gpa_tracker.infrastructure.db.models import User
from gpa_tracker.infrastructure.db.session import session_scope
from gpa_tracker.shared.logging import logger


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        tenant_name=row.tenant_name,
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def _find_one(self, *criteria) -> DomainUser | None:
        with session_scope() as session:
            row = session.query(User).filter(*criteria).first()
            if not row:
                return None
            return _to_domain(row)

    def find_by_username(self, username: str) -> DomainUser | None:
        return self._find_one(User.username == username)

    def find_by_email(self, email: str) -> DomainUser | None:
        return self._find_one(User.email == email)

    def find_by_tenant_name(self, tenant_name: str) -> DomainUser | None:
        return self._find_one(User.tenant_name == tenant_name)

    def find_by_id(self, user_id: int) -> DomainUser | None:
        return self._find_one(User.id == user_id)

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    tenant_name=user.tenant_name,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.repo: unique constraint rejected insert (username={user.username})")
            raise UserAlreadyExistsError() from exc

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with session_scope() as session:
            result = session.execute(
                update(User).where(User.id == user_id).values(password_hash=password_hash)
            )
            return bool(result.rowcount)
