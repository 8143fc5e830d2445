# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from gpa_tracker.application.services.password_hashing import WerkzeugPasswordHasher
from gpa_tracker.application.use_cases.records.compute_gpa import ComputeGpaUseCase
from gpa_tracker.application.use_cases.records.manage_records import (
    CreateRecordUseCase,
    DeleteRecordUseCase,
    ListRecordsUseCase,
    UpdateRecordUseCase,
)
from gpa_tracker.application.use_cases.users.login_user import LoginUserUseCase
from gpa_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from gpa_tracker.application.use_cases.users.request_password_reset import (
    RequestPasswordResetUseCase,
)
from gpa_tracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from gpa_tracker.infrastructure.auth import JwtSessionTokenService
from gpa_tracker.infrastructure.db import SessionLocal
from gpa_tracker.infrastructure.notifications import SendGridEmailNotifier
from gpa_tracker.infrastructure.repositories.records.sqlalchemy_record_repository import (
    SqlAlchemyClassRecordRepository,
)
from gpa_tracker.infrastructure.repositories.records.sqlalchemy_tenant_provisioner import (
    SqlAlchemyTenantProvisioner,
)
from gpa_tracker.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from gpa_tracker.infrastructure.reset_tokens import InMemoryResetTokenStore, ResetTokenSweeper
from gpa_tracker.infrastructure.resilience import RetryPolicy
from gpa_tracker.interfaces.http.controllers.auth_controller import AuthController
from gpa_tracker.interfaces.http.controllers.records_controller import ClassRecordsController
from gpa_tracker.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.auth.password_hash_method)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def tenant_provisioner(self) -> SqlAlchemyTenantProvisioner:
        return SqlAlchemyTenantProvisioner(SessionLocal)

    @cached_property
    def record_repository(self) -> SqlAlchemyClassRecordRepository:
        return SqlAlchemyClassRecordRepository(SessionLocal)

    @cached_property
    def session_tokens(self) -> JwtSessionTokenService:
        return JwtSessionTokenService(
            secret_key=self.config.secret_key,
            algorithm=self.config.auth.jwt_algorithm,
            ttl=timedelta(hours=self.config.auth.session_ttl_hours),
        )

    @cached_property
    def reset_token_store(self) -> InMemoryResetTokenStore:
        return InMemoryResetTokenStore()

    @cached_property
    def reset_token_sweeper(self) -> ResetTokenSweeper:
        return ResetTokenSweeper(
            self.reset_token_store, interval=self.config.reset.sweep_interval_seconds
        )

    @cached_property
    def notification_port(self) -> SendGridEmailNotifier:
        return SendGridEmailNotifier(
            self.config.email, retry_policy=RetryPolicy.from_config(self.config.resilience)
        )

    # Auth

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            provisioner=self.tenant_provisioner,
            password_hasher=self.password_hasher,
            notifications=self.notification_port,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.session_tokens,
            password_hasher=self.password_hasher,
            provisioner=self.tenant_provisioner,
        )

    @cached_property
    def request_password_reset_use_case(self) -> RequestPasswordResetUseCase:
        return RequestPasswordResetUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_store,
            notifications=self.notification_port,
            token_ttl=timedelta(seconds=self.config.reset.token_ttl_seconds),
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_store,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            request_reset_use_case=self.request_password_reset_use_case,
            reset_password_use_case=self.reset_password_use_case,
        )

    # Class records

    @cached_property
    def records_controller(self) -> ClassRecordsController:
        return ClassRecordsController(
            session_tokens=self.session_tokens,
            list_use_case=ListRecordsUseCase(records=self.record_repository),
            create_use_case=CreateRecordUseCase(records=self.record_repository),
            update_use_case=UpdateRecordUseCase(records=self.record_repository),
            delete_use_case=DeleteRecordUseCase(records=self.record_repository),
            gpa_use_case=ComputeGpaUseCase(records=self.record_repository),
        )


container = Container()
