# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.tasks.create_task import CreateTaskUseCase
from .use_cases.tasks.delete_task import DeleteTaskUseCase
from .use_cases.tasks.list_tasks import ListTasksUseCase
from .use_cases.tasks.update_task import ToggleTaskCompleteUseCase, UpdateTaskUseCase
from .use_cases.users.authenticate_session import AuthenticateSessionUseCase
from .use_cases.users.check_reset_token import CheckResetTokenUseCase
from .use_cases.users.forgot_password import ForgotPasswordUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.reset_password import ResetPasswordUseCase

__all__ = [
    "AuthenticateSessionUseCase",
    "CheckResetTokenUseCase",
    "CreateTaskUseCase",
    "DeleteTaskUseCase",
    "ForgotPasswordUseCase",
    "ListTasksUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
    "ResetPasswordUseCase",
    "ToggleTaskCompleteUseCase",
    "UpdateTaskUseCase",
]
