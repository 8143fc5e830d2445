# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import InvariantViolation, InvariantViolationError
from .records.entities import ClassDraft, ClassRecord, GpaSummary
from .records.tenancy import derive_tenant_name, validate_tenant_name
from .users.entities import ResetToken, SessionClaims, User

__all__ = [
    "ClassDraft",
    "ClassRecord",
    "GpaSummary",
    "InvariantViolation",
    "InvariantViolationError",
    "ResetToken",
    "SessionClaims",
    "User",
    "derive_tenant_name",
    "validate_tenant_name",
]
