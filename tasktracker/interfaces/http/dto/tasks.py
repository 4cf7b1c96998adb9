# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from tasktracker.domain.tasks.entities import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Priority,
    TaskChanges,
    TaskQuery,
    TaskSort,
)
from tasktracker.shared.clock import ensure_utc
from tasktracker.shared.errors.validation_types import ValidationErrorType


def _parse_priority(value: object) -> object:
    if value is None or isinstance(value, Priority):
        return value
    candidate = str(value).strip().lower()
    if candidate not in {p.value for p in Priority}:
        raise PydanticCustomError(
            ValidationErrorType.PRIORITY_INVALID,
            "Priority must be one of low, medium, high",
            {"allowed": "low,medium,high"},
        )
    return candidate


def _check_title(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise PydanticCustomError(
            ValidationErrorType.TITLE_BLANK,
            "Title cannot be blank",
            {},
        )
    return stripped


class CreateTaskDTO(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: datetime = Field(alias="dueDate")
    priority: Priority = Priority.MEDIUM

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _check_title(value)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: object) -> object:
        return Priority.MEDIUM if value is None else _parse_priority(value)

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class UpdateTaskDTO(BaseModel):
    title: str | None = Field(None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: datetime | None = Field(None, alias="dueDate")
    priority: Priority | None = None
    completed: bool | None = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        return None if value is None else _check_title(value)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, value: object) -> object:
        return _parse_priority(value)

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, value: datetime | None) -> datetime | None:
        return None if value is None else ensure_utc(value)

    def to_changes(self) -> TaskChanges:
        return TaskChanges(
            title=self.title,
            description=self.description,
            description_set="description" in self.model_fields_set,
            due_date=self.due_date,
            priority=self.priority,
            completed=self.completed,
        )


class ListTasksQueryDTO(BaseModel):
    """Query-string filters; unknown priorities and sort keys are ignored."""

    completed: str | None = None
    priority: str | None = None
    search: str | None = None
    sort_by: str | None = Field(None, alias="sortBy")

    model_config = ConfigDict(populate_by_name=True)

    def to_query(self, owner_id: int) -> TaskQuery:
        completed = None
        if self.completed:
            completed = self.completed.strip().lower() == "true"
        priority = None
        if self.priority and self.priority.lower() in {p.value for p in Priority}:
            priority = Priority(self.priority.lower())
        search = self.search.strip() if self.search and self.search.strip() else None
        return TaskQuery(
            owner_id=owner_id,
            completed=completed,
            priority=priority,
            search=search,
            sort=TaskSort.parse(self.sort_by),
        )
