# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Tenant store naming rules."""

from __future__ import annotations

import re

from ..exceptions import InvariantViolation

TENANT_PREFIX = "user_"
TENANT_SUFFIX = "_data"
TENANT_NAME_MAX_LENGTH = 128

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")
_ALLOWED_NAME = re.compile(rf"^[A-Za-z0-9_]{{1,{TENANT_NAME_MAX_LENGTH}}}$")


def derive_tenant_name(username: str) -> str:
    """Map a username to its tenant store name.

    Every character outside ``[A-Za-z0-9_]`` becomes ``_``, so ``"a.b"`` and
    ``"a_b"`` share a name; registration treats that as a duplicate.
    """

    if not username:
        raise InvariantViolation("username is required", field="username")
    return validate_tenant_name(_UNSAFE_CHARS.sub("_", f"{TENANT_PREFIX}{username}{TENANT_SUFFIX}"))


def validate_tenant_name(name: str) -> str:
    if not isinstance(name, str) or not _ALLOWED_NAME.fullmatch(name):
        raise InvariantViolation("tenant name is not allowed", field="tenant")
    return name


__all__ = ["derive_tenant_name", "validate_tenant_name"]
