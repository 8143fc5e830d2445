# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from gpa_tracker.application.use_cases.users.login_user import LoginUserUseCase
from gpa_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from gpa_tracker.application.use_cases.users.request_password_reset import (
    RequestPasswordResetUseCase,
)
from gpa_tracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from gpa_tracker.domain.exceptions import InvariantViolation
from gpa_tracker.domain.users.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredResetTokenError,
    UserNotFoundError,
)
from gpa_tracker.infrastructure.audit import AuditAction, audit_log
from gpa_tracker.interfaces.http.dto.auth import (
    ForgotPasswordRequestDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    MessageDTO,
    PublicUserDTO,
    RegisterRequestDTO,
    ResetPasswordRequestDTO,
)
from gpa_tracker.shared.errors import AppError, InfrastructureError
from gpa_tracker.shared.errors.base import ValidationError as AppValidationError
from gpa_tracker.shared.errors.validation import raise_validation_error
from gpa_tracker.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        request_reset_use_case: RequestPasswordResetUseCase,
        reset_password_use_case: ResetPasswordUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._request_reset_use_case = request_reset_use_case
        self._reset_password_use_case = reset_password_use_case

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user = self._register_use_case.execute(dto.username, dto.email, dto.password)
        except InvariantViolation as exc:
            raise AppValidationError(context={"fields": [exc.field or "username"]}) from exc
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"auth.register: err (username={dto.username})")
            raise InfrastructureError(code="auth_register_failed") from exc

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=_get_client_ip(),
            details={"username": user.username},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(MessageDTO(message="User created successfully").model_dump()), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = _get_client_ip()
        try:
            user, token = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise
        except AppError:
            raise
        except Exception as exc:
            logger.exception(f"auth.login: err (username={dto.username})")
            raise InfrastructureError(code="auth_login_failed") from exc

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            details={"username": user.username},
            success=True,
        )
        payload = LoginResponseDTO(token=token, user=PublicUserDTO.from_domain(user))
        logger.info(f"auth.login: ok user_id={user.id}")
        return jsonify(payload.model_dump()), 200

    def forgot_password(self) -> tuple[Response, int]:
        try:
            dto = ForgotPasswordRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            message = self._request_reset_use_case.execute(dto.email)
        except AppError:
            raise
        except Exception as exc:
            logger.exception("auth.forgot_password: err")
            raise InfrastructureError(code="auth_forgot_password_failed") from exc
        audit_log(
            AuditAction.PASSWORD_RESET_REQUESTED,
            ip_address=_get_client_ip(),
            success=True,
        )
        return jsonify(MessageDTO(message=message).model_dump()), 200

    def reset_password(self) -> tuple[Response, int]:
        try:
            dto = ResetPasswordRequestDTO.model_validate(_json_body())
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user_id = self._reset_password_use_case.execute(dto.token, dto.new_password)
        except (InvalidOrExpiredResetTokenError, UserNotFoundError) as exc:
            audit_log(
                AuditAction.PASSWORD_RESET_FAILED,
                ip_address=_get_client_ip(),
                details={"reason": exc.code},
                success=False,
            )
            raise
        except AppError:
            raise
        except Exception as exc:
            logger.exception("auth.reset_password: err")
            raise InfrastructureError(code="auth_reset_password_failed") from exc

        audit_log(
            AuditAction.PASSWORD_RESET,
            user_id=user_id,
            ip_address=_get_client_ip(),
            success=True,
        )
        return jsonify(MessageDTO(message="Password has been reset!").model_dump()), int(
            HTTPStatus.OK
        )

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/forgot-password", view_func=self.forgot_password, methods=["POST"])
        bp.add_url_rule("/reset-password", view_func=self.reset_password, methods=["POST"])
        return bp
