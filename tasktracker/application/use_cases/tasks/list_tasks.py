# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.domain.tasks.entities import Task, TaskQuery
from tasktracker.domain.tasks.repositories import TaskRepository


class ListTasksUseCase:
    def __init__(self, *, tasks: TaskRepository) -> None:
        self._tasks = tasks

    def execute(self, query: TaskQuery) -> list[Task]:
        items = list(self._tasks.list(query))
        # Priority is an enum, so rank it here rather than alphabetically in SQL.
        if query.sort is not None and query.sort.field == "priority":
            items.sort(
                key=lambda task: task.priority.rank,
                reverse=query.sort.direction == "desc",
            )
        return items


__all__ = ["ListTasksUseCase"]
