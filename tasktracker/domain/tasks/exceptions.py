# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from tasktracker.shared.errors.base import DomainError


class TaskNotFoundError(DomainError):
    default_code = "task_not_found"
    default_status = HTTPStatus.NOT_FOUND

    def __init__(self, task_id: int) -> None:
        super().__init__(context={"task_id": task_id})
