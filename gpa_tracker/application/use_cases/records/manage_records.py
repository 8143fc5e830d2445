# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Class record CRUD scoped to the caller's tenant store.

Every use case takes :class:`SessionClaims` rather than a tenant name so the
store can only ever come from a validated session token.
"""

from __future__ import annotations

from collections.abc import Sequence

from gpa_tracker.domain.records.entities import (
    ClassDraft,
    ClassRecord,
    is_storable_record_id,
)
from gpa_tracker.domain.records.repositories import ClassRecordRepository
from gpa_tracker.domain.records.tenancy import validate_tenant_name
from gpa_tracker.domain.users.entities import SessionClaims
from gpa_tracker.shared.errors.base import RecordNotFoundError
from gpa_tracker.shared.logging import logger


class ListRecordsUseCase:
    def __init__(self, *, records: ClassRecordRepository) -> None:
        self._records = records

    def execute(self, claims: SessionClaims) -> Sequence[ClassRecord]:
        tenant = validate_tenant_name(claims.tenant)
        items = self._records.list_for_tenant(tenant)
        logger.info(f"records.list: ok (user_id={claims.user_id}, n={len(items)})")
        return items


class CreateRecordUseCase:
    def __init__(self, *, records: ClassRecordRepository) -> None:
        self._records = records

    def execute(self, claims: SessionClaims, draft: ClassDraft) -> ClassRecord:
        tenant = validate_tenant_name(claims.tenant)
        record = self._records.add(tenant, draft)
        logger.info(
            f"records.create: ok (user_id={claims.user_id}, record_id={record.id}, "
            f"department={record.department}, course_id={record.course_id})"
        )
        return record


class UpdateRecordUseCase:
    def __init__(self, *, records: ClassRecordRepository) -> None:
        self._records = records

    def execute(self, claims: SessionClaims, record_id: int, draft: ClassDraft) -> ClassRecord:
        tenant = validate_tenant_name(claims.tenant)
        record = None
        if is_storable_record_id(record_id):
            record = self._records.replace(tenant, record_id, draft)
        if record is None:
            logger.info(f"records.update: not_found (user_id={claims.user_id}, record_id={record_id})")
            raise RecordNotFoundError(record_id)
        logger.info(f"records.update: ok (user_id={claims.user_id}, record_id={record_id})")
        return record


class DeleteRecordUseCase:
    def __init__(self, *, records: ClassRecordRepository) -> None:
        self._records = records

    def execute(self, claims: SessionClaims, record_id: int) -> bool:
        tenant = validate_tenant_name(claims.tenant)
        removed = is_storable_record_id(record_id) and self._records.remove(tenant, record_id)
        logger.info(
            f"records.delete: {'ok' if removed else 'noop'} "
            f"(user_id={claims.user_id}, record_id={record_id})"
        )
        return removed
