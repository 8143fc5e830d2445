# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from gpa_tracker.domain.records.entities import ClassDraft, GpaSummary
from gpa_tracker.domain.records.entities import ClassRecord as DomainClassRecord
from gpa_tracker.domain.records.repositories import ClassRecordRepository
from gpa_tracker.infrastructure.db.models import ClassRecord
from gpa_tracker.infrastructure.unit_of_work import unit_of_work_scope


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_domain(row: ClassRecord) -> DomainClassRecord:
    return DomainClassRecord(
        id=row.id,
        tenant=row.tenant,
        department=row.department,
        course_id=int(row.course_id),
        grade=Decimal(str(row.grade)),
        credits=int(row.credits),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlAlchemyClassRecordRepository(ClassRecordRepository):
    """Class records filtered by tenant on every statement."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_for_tenant(self, tenant: str) -> Sequence[DomainClassRecord]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.scalars(
                select(ClassRecord)
                .where(ClassRecord.tenant == tenant)
                .order_by(ClassRecord.created_at.desc(), ClassRecord.id.desc())
            ).all()
            return [_to_domain(row) for row in rows]

    def add(self, tenant: str, draft: ClassDraft) -> DomainClassRecord:
        with unit_of_work_scope(self._session_factory) as session:
            row = ClassRecord(
                tenant=tenant,
                department=draft.department,
                course_id=draft.course_id,
                grade=draft.grade,
                credits=draft.credits,
            )
            session.add(row)
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def replace(
        self, tenant: str, record_id: int, draft: ClassDraft
    ) -> DomainClassRecord | None:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(ClassRecord)
                .where(ClassRecord.id == record_id, ClassRecord.tenant == tenant)
                .values(
                    department=draft.department,
                    course_id=draft.course_id,
                    grade=draft.grade,
                    credits=draft.credits,
                    updated_at=datetime.now(UTC),
                )
            )
            if not result.rowcount:
                return None
            row = session.scalars(
                select(ClassRecord).where(
                    ClassRecord.id == record_id, ClassRecord.tenant == tenant
                )
            ).one()
            return _to_domain(row)

    def remove(self, tenant: str, record_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                delete(ClassRecord).where(
                    ClassRecord.id == record_id, ClassRecord.tenant == tenant
                )
            )
            return bool(result.rowcount)

    def summarize(self, tenant: str) -> GpaSummary:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.execute(
                select(ClassRecord.grade, ClassRecord.credits).where(
                    ClassRecord.tenant == tenant
                )
            ).all()
        points = sum((Decimal(str(grade)) * credits for grade, credits in rows), Decimal("0"))
        credits = sum(credits for _, credits in rows)
        return GpaSummary.from_totals(points, credits)
