from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from gpa_tracker.domain import (
    ClassDraft,
    ClassRecord,
    GpaSummary,
    InvariantViolation,
    derive_tenant_name,
    validate_tenant_name,
)

NOW = datetime(2025, 1, 1, tzinfo=UTC)


def _record(record_id: int, grade: str, credits: int) -> ClassRecord:
    return ClassRecord(
        id=record_id,
        tenant="user_alice_data",
        department="CS",
        course_id=100 + record_id,
        grade=Decimal(grade),
        credits=credits,
        created_at=NOW,
        updated_at=NOW,
    )


def test_derive_tenant_name_plain_username() -> None:
    assert derive_tenant_name("alice") == "user_alice_data"


def test_derive_tenant_name_replaces_unsafe_characters() -> None:
    assert derive_tenant_name("a.b-c d") == "user_a_b_c_d_data"
    assert derive_tenant_name("a.b") == derive_tenant_name("a_b")


def test_derive_tenant_name_rejects_empty_username() -> None:
    with pytest.raises(InvariantViolation):
        derive_tenant_name("")


def test_derive_tenant_name_rejects_overlong_username() -> None:
    with pytest.raises(InvariantViolation):
        derive_tenant_name("x" * 200)


@pytest.mark.parametrize(
    "name", ["", "user alice", "user_alice_data;--", "users.class_records", "ü"]
)
def test_validate_tenant_name_rejects_unsafe(name: str) -> None:
    with pytest.raises(InvariantViolation) as excinfo:
        validate_tenant_name(name)

    assert excinfo.value.field == "tenant"


def test_class_draft_normalizes_fields() -> None:
    draft = ClassDraft(department=" cs ", course_id=101, grade=3.3, credits=3)

    assert draft.department == "CS"
    assert draft.grade == Decimal("3.30")
    assert draft.credits == 3


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"department": ""}, "department"),
        ({"department": "MATHS"}, "department"),
        ({"course_id": -1}, "course_id"),
        ({"grade": 4.01}, "grade"),
        ({"grade": -0.5}, "grade"),
        ({"grade": "abc"}, "grade"),
        ({"credits": 0}, "credits"),
    ],
)
def test_class_draft_rejects_invalid_values(kwargs: dict, field: str) -> None:
    values = {"department": "CS", "course_id": 101, "grade": 3.0, "credits": 3}
    values.update(kwargs)

    with pytest.raises(InvariantViolation) as excinfo:
        ClassDraft(**values)

    assert excinfo.value.field == field


def test_gpa_is_credit_weighted() -> None:
    summary = GpaSummary.from_records([_record(1, "4.0", 3), _record(2, "3.0", 2)])

    assert summary.gpa == Decimal("3.60")
    assert summary.total_credits == 5


def test_gpa_rounds_half_up_to_two_places() -> None:
    summary = GpaSummary.from_records([_record(1, "3.7", 3), _record(2, "3.3", 4), _record(3, "2.0", 1)])

    # (11.1 + 13.2 + 2.0) / 8 = 3.2875
    assert summary.gpa == Decimal("3.29")
    assert summary.total_credits == 8


def test_gpa_of_empty_store_is_zero() -> None:
    summary = GpaSummary.from_records([])

    assert summary.gpa == Decimal("0.00")
    assert summary.total_credits == 0
