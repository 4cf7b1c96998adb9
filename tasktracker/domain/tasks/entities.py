# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from tasktracker.domain.exceptions import InvariantViolation


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


@dataclass(slots=True, frozen=True)
class Task:

    id: int
    owner_id: int
    title: str
    description: str | None
    due_date: datetime
    priority: Priority
    completed: bool
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise InvariantViolation("title must not be blank", field="title")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise InvariantViolation("title is too long", field="title")
        if self.description is not None and len(self.description) > DESCRIPTION_MAX_LENGTH:
            raise InvariantViolation("description is too long", field="description")

    def to_public(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner_id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date.isoformat(),
            "priority": self.priority.value,
            "completed": self.completed,
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class NewTask:

    owner_id: int
    title: str
    description: str | None
    due_date: datetime
    priority: Priority = Priority.MEDIUM


@dataclass(slots=True, frozen=True)
class TaskChanges:
    """Partial update; ``None`` leaves a field untouched except ``description``."""

    title: str | None = None
    description: str | None = None
    description_set: bool = False
    due_date: datetime | None = None
    priority: Priority | None = None
    completed: bool | None = None


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


SORTABLE_FIELDS = ("title", "dueDate", "createdAt", "updatedAt", "completed", "priority")


@dataclass(slots=True, frozen=True)
class TaskSort:

    field: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, raw: str | None) -> TaskSort | None:
        """Parse ``field:dir``; unknown fields yield ``None`` (default ordering)."""
        if not raw:
            return None
        name, _, direction = raw.partition(":")
        name = name.strip()
        if name not in SORTABLE_FIELDS:
            return None
        resolved = SortDirection.DESC if direction.strip().lower() == "desc" else SortDirection.ASC
        return cls(field=name, direction=resolved)


@dataclass(slots=True, frozen=True)
class TaskQuery:

    owner_id: int
    completed: bool | None = None
    priority: Priority | None = None
    search: str | None = None
    sort: TaskSort | None = None
