# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.domain.tasks.entities import NewTask, Task
from tasktracker.domain.tasks.repositories import TaskRepository
from tasktracker.shared.clock import Clock, utcnow


class CreateTaskUseCase:
    def __init__(self, *, tasks: TaskRepository, clock: Clock = utcnow) -> None:
        self._tasks = tasks
        self._clock = clock

    def execute(self, task: NewTask) -> Task:
        return self._tasks.add(task, self._clock())


__all__ = ["CreateTaskUseCase"]
