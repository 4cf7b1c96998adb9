# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.domain.tasks.entities import Task, TaskChanges
from tasktracker.domain.tasks.exceptions import TaskNotFoundError
from tasktracker.domain.tasks.repositories import TaskRepository
from tasktracker.shared.clock import Clock, utcnow


class UpdateTaskUseCase:
    def __init__(self, *, tasks: TaskRepository, clock: Clock = utcnow) -> None:
        self._tasks = tasks
        self._clock = clock

    def execute(self, owner_id: int, task_id: int, changes: TaskChanges) -> Task:
        updated = self._tasks.update(owner_id, task_id, changes, self._clock())
        if updated is None:
            raise TaskNotFoundError(task_id)
        return updated


class ToggleTaskCompleteUseCase:
    def __init__(self, *, tasks: TaskRepository, clock: Clock = utcnow) -> None:
        self._tasks = tasks
        self._clock = clock

    def execute(self, owner_id: int, task_id: int) -> Task:
        toggled = self._tasks.toggle_complete(owner_id, task_id, self._clock())
        if toggled is None:
            raise TaskNotFoundError(task_id)
        return toggled


__all__ = ["ToggleTaskCompleteUseCase", "UpdateTaskUseCase"]
