# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from gpa_tracker.domain.records.entities import ClassDraft, ClassRecord, GpaSummary


class ClassRecordRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    department: str = Field(min_length=1, max_length=4)
    course_id: int = Field(ge=0, validation_alias=AliasChoices("courseId", "classId"))
    grade: float = Field(ge=0.0, le=4.0, allow_inf_nan=False)
    credits: int = Field(gt=0, le=100)

    def to_draft(self) -> ClassDraft:
        return ClassDraft(
            department=self.department,
            course_id=self.course_id,
            grade=self.grade,
            credits=self.credits,
        )


class ClassRecordDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    department: str
    course_id: int = Field(serialization_alias="courseId")
    grade: float
    credits: int
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    @classmethod
    def from_domain(cls, record: ClassRecord) -> ClassRecordDTO:
        return cls(
            id=record.id,
            department=record.department,
            course_id=record.course_id,
            grade=float(record.grade),
            credits=record.credits,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class GpaDTO(BaseModel):
    gpa: float
    total_credits: int = Field(serialization_alias="totalCredits")

    @classmethod
    def from_domain(cls, summary: GpaSummary) -> GpaDTO:
        return cls(gpa=float(summary.gpa), total_credits=summary.total_credits)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
