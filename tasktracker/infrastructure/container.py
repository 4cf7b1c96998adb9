# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from tasktracker.application.services.password_hashing import WerkzeugPasswordHasher
from tasktracker.application.services.reset_tokens import ResetTokenGenerator
from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.application.services.session_tokens import (
    SignedSessionTokenCodec,
    TokenSettings,
)
from tasktracker.application.use_cases.tasks.create_task import CreateTaskUseCase
from tasktracker.application.use_cases.tasks.delete_task import DeleteTaskUseCase
from tasktracker.application.use_cases.tasks.list_tasks import ListTasksUseCase
from tasktracker.application.use_cases.tasks.update_task import (
    ToggleTaskCompleteUseCase,
    UpdateTaskUseCase,
)
from tasktracker.application.use_cases.users.authenticate_session import (
    AuthenticateSessionUseCase,
)
from tasktracker.application.use_cases.users.check_reset_token import CheckResetTokenUseCase
from tasktracker.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from tasktracker.application.use_cases.users.login_user import LoginUserUseCase
from tasktracker.application.use_cases.users.logout_user import LogoutUserUseCase
from tasktracker.application.use_cases.users.register_user import RegisterUserUseCase
from tasktracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from tasktracker.domain.users.repositories import MailSender
from tasktracker.infrastructure.db import SessionLocal
from tasktracker.infrastructure.mail.smtp_mailer import SmtpMailSender
from tasktracker.infrastructure.repositories.tasks.sqlalchemy_task_repository import (
    SqlAlchemyTaskRepository,
)
from tasktracker.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from tasktracker.interfaces.http.controllers.auth_controller import AuthController
from tasktracker.interfaces.http.controllers.misc_controller import MiscController
from tasktracker.interfaces.http.controllers.task_controller import TaskController
from tasktracker.interfaces.http.session_guard import SessionGuard
from tasktracker.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    # Credential services

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_settings(self) -> TokenSettings:
        session = self.config.session
        return TokenSettings(
            secret_key=self.config.secret_key,
            lifetime=session.lifetime,
            salt=session.salt,
        )

    @cached_property
    def token_codec(self) -> SignedSessionTokenCodec:
        return SignedSessionTokenCodec(self.token_settings)

    @cached_property
    def reset_token_generator(self) -> ResetTokenGenerator:
        return ResetTokenGenerator(lifetime=self.config.reset.lifetime)

    @cached_property
    def mail_sender(self) -> MailSender:
        return SmtpMailSender(self.config.mail)

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def task_repository(self) -> SqlAlchemyTaskRepository:
        return SqlAlchemyTaskRepository(SessionLocal)

    @cached_property
    def session_issuer(self) -> SessionIssuer:
        return SessionIssuer(
            codec=self.token_codec,
            users=self.user_repository,
            lifetime=self.config.session.lifetime,
            cookie_name=self.config.session.cookie_name,
            cookie_secure=self.config.cookie_secure(),
            cookie_samesite=self.config.security.cookie_samesite,
        )

    # Auth use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            sessions=self.session_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_issuer)

    @cached_property
    def authenticate_session_use_case(self) -> AuthenticateSessionUseCase:
        return AuthenticateSessionUseCase(sessions=self.session_issuer)

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_generator,
            mailer=self.mail_sender,
            frontend_base=self.config.reset.frontend_base,
            lifetime=self.config.reset.lifetime,
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_generator,
            password_hasher=self.password_hasher,
            sessions=self.session_issuer,
        )

    @cached_property
    def check_reset_token_use_case(self) -> CheckResetTokenUseCase:
        return CheckResetTokenUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_generator,
        )

    # Task use cases

    @cached_property
    def create_task_use_case(self) -> CreateTaskUseCase:
        return CreateTaskUseCase(tasks=self.task_repository)

    @cached_property
    def list_tasks_use_case(self) -> ListTasksUseCase:
        return ListTasksUseCase(tasks=self.task_repository)

    @cached_property
    def update_task_use_case(self) -> UpdateTaskUseCase:
        return UpdateTaskUseCase(tasks=self.task_repository)

    @cached_property
    def toggle_task_use_case(self) -> ToggleTaskCompleteUseCase:
        return ToggleTaskCompleteUseCase(tasks=self.task_repository)

    @cached_property
    def delete_task_use_case(self) -> DeleteTaskUseCase:
        return DeleteTaskUseCase(tasks=self.task_repository)

    # HTTP

    @cached_property
    def session_guard(self) -> SessionGuard:
        return SessionGuard(
            self.authenticate_session_use_case.execute,
            cookie_name=self.session_issuer.cookie_name,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
            check_reset_token_use_case=self.check_reset_token_use_case,
            guard=self.session_guard,
        )

    @cached_property
    def task_controller(self) -> TaskController:
        return TaskController(
            create_use_case=self.create_task_use_case,
            list_use_case=self.list_tasks_use_case,
            update_use_case=self.update_task_use_case,
            toggle_use_case=self.toggle_task_use_case,
            delete_use_case=self.delete_task_use_case,
            guard=self.session_guard,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()


container = Container()
