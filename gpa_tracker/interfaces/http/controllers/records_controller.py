# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from time import perf_counter

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from gpa_tracker.application.use_cases.records.compute_gpa import ComputeGpaUseCase
from gpa_tracker.application.use_cases.records.manage_records import (
    CreateRecordUseCase,
    DeleteRecordUseCase,
    ListRecordsUseCase,
    UpdateRecordUseCase,
)
from gpa_tracker.domain.exceptions import InvariantViolation
from gpa_tracker.domain.records.entities import ClassDraft
from gpa_tracker.domain.users.entities import SessionClaims
from gpa_tracker.domain.users.repositories import SessionTokenService
from gpa_tracker.infrastructure.audit import AuditAction, audit_log
from gpa_tracker.infrastructure.auth import bearer_required
from gpa_tracker.interfaces.http.dto.auth import MessageDTO
from gpa_tracker.interfaces.http.dto.records import (
    ClassRecordDTO,
    ClassRecordRequestDTO,
    GpaDTO,
)
from gpa_tracker.shared.errors import AppError, InfrastructureError
from gpa_tracker.shared.errors.base import ValidationError as AppValidationError
from gpa_tracker.shared.errors.validation import raise_validation_error
from gpa_tracker.shared.logging import logger


def _parse_draft() -> ClassDraft:
    payload = request.get_json(silent=True)
    try:
        dto = ClassRecordRequestDTO.model_validate(payload if isinstance(payload, dict) else {})
    except ValidationError as exc:
        raise_validation_error(exc)
    try:
        return dto.to_draft()
    except InvariantViolation as exc:
        raise AppValidationError(context={"fields": [exc.field or "body"]}) from exc


class ClassRecordsController:
    """Tenant-scoped class records under ``/api/data``."""

    def __init__(
        self,
        *,
        session_tokens: SessionTokenService,
        list_use_case: ListRecordsUseCase,
        create_use_case: CreateRecordUseCase,
        update_use_case: UpdateRecordUseCase,
        delete_use_case: DeleteRecordUseCase,
        gpa_use_case: ComputeGpaUseCase,
    ) -> None:
        self.session_tokens = session_tokens
        self._list_use_case = list_use_case
        self._create_use_case = create_use_case
        self._update_use_case = update_use_case
        self._delete_use_case = delete_use_case
        self._gpa_use_case = gpa_use_case

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("records", __name__, url_prefix="/api")
        bp.add_url_rule("/data", view_func=self.list_records, methods=["GET"])
        bp.add_url_rule("/data", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/data/aggregate", view_func=self.aggregate, methods=["GET"])
        bp.add_url_rule(
            "/data/gpa", endpoint="gpa", view_func=self.aggregate, methods=["GET"]
        )
        bp.add_url_rule("/data/<int:record_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/data/<int:record_id>", view_func=self.delete, methods=["DELETE"])
        return bp

    @bearer_required
    def list_records(self, claims: SessionClaims):
        t0 = perf_counter()
        try:
            items = self._list_use_case.execute(claims)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"records.list: err (user_id={claims.user_id})")
            raise InfrastructureError(code="records_list_failed") from exc
        dt = (perf_counter() - t0) * 1000
        logger.debug(f"records.list: dt_ms={dt:.0f}")
        return jsonify([ClassRecordDTO.from_domain(item).to_json() for item in items]), 200

    @bearer_required
    def create(self, claims: SessionClaims):
        draft = _parse_draft()
        try:
            record = self._create_use_case.execute(claims, draft)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"records.create: err (user_id={claims.user_id})")
            raise InfrastructureError(code="records_create_failed") from exc

        audit_log(
            AuditAction.RECORD_CREATED,
            user_id=claims.user_id,
            ip_address=request.remote_addr,
            details={
                "record_id": record.id,
                "department": record.department,
                "course_id": record.course_id,
            },
            success=True,
        )
        return jsonify(ClassRecordDTO.from_domain(record).to_json()), 201

    @bearer_required
    def update(self, record_id: int, claims: SessionClaims):
        draft = _parse_draft()
        try:
            record = self._update_use_case.execute(claims, record_id, draft)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"records.update: err (user_id={claims.user_id}, record_id={record_id})")
            raise InfrastructureError(code="records_update_failed") from exc

        audit_log(
            AuditAction.RECORD_UPDATED,
            user_id=claims.user_id,
            ip_address=request.remote_addr,
            details={"record_id": record_id},
            success=True,
        )
        return jsonify(ClassRecordDTO.from_domain(record).to_json()), 201

    @bearer_required
    def delete(self, record_id: int, claims: SessionClaims):
        try:
            removed = self._delete_use_case.execute(claims, record_id)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"records.delete: err (user_id={claims.user_id}, record_id={record_id})")
            raise InfrastructureError(code="records_delete_failed") from exc

        if removed:
            audit_log(
                AuditAction.RECORD_DELETED,
                user_id=claims.user_id,
                ip_address=request.remote_addr,
                details={"record_id": record_id},
                success=True,
            )
        return jsonify(MessageDTO(message="Class deleted").model_dump()), 201

    @bearer_required
    def aggregate(self, claims: SessionClaims):
        try:
            summary = self._gpa_use_case.execute(claims)
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"records.gpa: err (user_id={claims.user_id})")
            raise InfrastructureError(code="records_aggregate_failed") from exc
        return jsonify(GpaDTO.from_domain(summary).to_json()), 200
