# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain entities for a tenant's class records and their aggregate."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..exceptions import InvariantViolation

GRADE_MIN = Decimal("0.00")
GRADE_MAX = Decimal("4.00")
DEPARTMENT_MAX_LENGTH = 4
# Largest id a signed 64-bit INTEGER column can hold.
RECORD_ID_MAX = 2**63 - 1
_TWO_PLACES = Decimal("0.01")


def _to_grade(value: object) -> Decimal:
    try:
        grade = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvariantViolation("grade must be a number", field="grade") from exc
    if not grade.is_finite():
        raise InvariantViolation("grade must be a number", field="grade")
    return grade.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def is_storable_record_id(record_id: int) -> bool:
    return 0 < record_id <= RECORD_ID_MAX


@dataclass(slots=True, frozen=True)
class ClassDraft:
    """Mutable fields of a class record, validated before they reach storage."""

    department: str
    course_id: int
    grade: Decimal
    credits: int

    def __post_init__(self) -> None:
        department = (self.department or "").strip().upper()
        if not department:
            raise InvariantViolation("department is required", field="department")
        if len(department) > DEPARTMENT_MAX_LENGTH:
            raise InvariantViolation(
                f"department must be at most {DEPARTMENT_MAX_LENGTH} characters",
                field="department",
            )
        object.__setattr__(self, "department", department)

        if isinstance(self.course_id, bool) or int(self.course_id) < 0:
            raise InvariantViolation("course id must be a non-negative integer", field="course_id")
        object.__setattr__(self, "course_id", int(self.course_id))

        grade = _to_grade(self.grade)
        if grade < GRADE_MIN or grade > GRADE_MAX:
            raise InvariantViolation(
                f"grade must be between {GRADE_MIN} and {GRADE_MAX}", field="grade"
            )
        object.__setattr__(self, "grade", grade)

        if isinstance(self.credits, bool) or int(self.credits) <= 0:
            raise InvariantViolation("credits must be positive", field="credits")
        object.__setattr__(self, "credits", int(self.credits))


@dataclass(slots=True, frozen=True)
class ClassRecord:
    """A stored class entry owned by exactly one tenant store."""

    id: int
    tenant: str
    department: str
    course_id: int
    grade: Decimal
    credits: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if self.credits <= 0:
            raise InvariantViolation("credits must be positive", field="credits")

    @property
    def grade_points(self) -> Decimal:
        return self.grade * self.credits


@dataclass(slots=True, frozen=True)
class GpaSummary:
    """Credit-weighted grade average over a tenant's records."""

    gpa: Decimal
    total_credits: int

    @classmethod
    def from_totals(cls, total_points: Decimal | None, total_credits: int | None) -> GpaSummary:
        """Build the summary from raw sums.

        An empty store has no credits; its average is defined as zero rather
        than the undefined 0/0.
        """

        credits = int(total_credits or 0)
        if credits <= 0:
            return cls(gpa=Decimal("0.00"), total_credits=0)
        points = Decimal(str(total_points or 0))
        gpa = (points / credits).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
        return cls(gpa=gpa, total_credits=credits)

    @classmethod
    def from_records(cls, records: Iterable[ClassRecord]) -> GpaSummary:
        points = Decimal("0")
        credits = 0
        for record in records:
            points += record.grade_points
            credits += record.credits
        return cls.from_totals(points, credits)
