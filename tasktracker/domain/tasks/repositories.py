# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from .entities import NewTask, Task, TaskChanges, TaskQuery


class TaskRepository(Protocol):
    def add(self, task: NewTask, now: datetime) -> Task: ...
    def list(self, query: TaskQuery) -> Sequence[Task]: ...
    def update(self, owner_id: int, task_id: int, changes: TaskChanges, now: datetime) -> Task | None: ...
    def toggle_complete(self, owner_id: int, task_id: int, now: datetime) -> Task | None: ...
    def delete(self, owner_id: int, task_id: int) -> bool: ...
