# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from gpa_tracker.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED


class InvalidSessionTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.FORBIDDEN


class InvalidOrExpiredResetTokenError(DomainError):
    code = "invalid_or_expired_reset_token"
