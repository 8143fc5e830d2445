# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .bearer import bearer_required, bearer_token
from .session_tokens import JwtSessionTokenService

__all__ = ["JwtSessionTokenService", "bearer_required", "bearer_token"]
