# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from gpa_tracker.domain.records.entities import GpaSummary
from gpa_tracker.domain.records.repositories import ClassRecordRepository
from gpa_tracker.domain.records.tenancy import validate_tenant_name
from gpa_tracker.domain.users.entities import SessionClaims
from gpa_tracker.shared.logging import logger


class ComputeGpaUseCase:
    def __init__(self, *, records: ClassRecordRepository) -> None:
        self._records = records

    def execute(self, claims: SessionClaims) -> GpaSummary:
        summary = self._records.summarize(validate_tenant_name(claims.tenant))
        logger.info(
            f"records.gpa: ok (user_id={claims.user_id}, gpa={summary.gpa}, "
            f"total_credits={summary.total_credits})"
        )
        return summary
