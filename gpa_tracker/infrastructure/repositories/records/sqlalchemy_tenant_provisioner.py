# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gpa_tracker.domain.records.repositories import TenantProvisioner
from gpa_tracker.domain.records.tenancy import validate_tenant_name
from gpa_tracker.infrastructure.db.models import TenantStore
from gpa_tracker.infrastructure.unit_of_work import unit_of_work_scope
from gpa_tracker.shared.logging import logger


class SqlAlchemyTenantProvisioner(TenantProvisioner):
    """Registers isolated record stores in the ``tenant_stores`` table.

    Records of every tenant share one table keyed by the store name, so
    provisioning never builds schema statements from user input.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def exists(self, tenant: str) -> bool:
        name = validate_tenant_name(tenant)
        with unit_of_work_scope(self._session_factory) as session:
            return session.get(TenantStore, name) is not None

    def provision(self, tenant: str) -> bool:
        name = validate_tenant_name(tenant)
        try:
            with unit_of_work_scope(self._session_factory) as session:
                if session.get(TenantStore, name) is not None:
                    logger.debug(f"tenants.provision: exists (tenant={name})")
                    return False
                session.add(TenantStore(name=name))
                session.flush()
        except IntegrityError:
            logger.debug(f"tenants.provision: created concurrently (tenant={name})")
            return False
        logger.info(f"tenants.provision: created (tenant={name})")
        return True
