# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import ClassDraft, ClassRecord, GpaSummary


class ClassRecordRepository(Protocol):
    def list_for_tenant(self, tenant: str) -> Sequence[ClassRecord]: ...
    def add(self, tenant: str, draft: ClassDraft) -> ClassRecord: ...
    def replace(self, tenant: str, record_id: int, draft: ClassDraft) -> ClassRecord | None: ...
    def remove(self, tenant: str, record_id: int) -> bool: ...
    def summarize(self, tenant: str) -> GpaSummary: ...


class TenantProvisioner(Protocol):
    def provision(self, tenant: str) -> bool: ...
    def exists(self, tenant: str) -> bool: ...
