# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from tasktracker.domain.tasks.entities import (
    NewTask,
    Priority,
    SortDirection,
    TaskChanges,
    TaskQuery,
    TaskSort,
)
from tasktracker.domain.tasks.entities import Task as DomainTask
from tasktracker.domain.tasks.repositories import TaskRepository
from tasktracker.infrastructure.db.models import Task
from tasktracker.infrastructure.unit_of_work import unit_of_work_scope
from tasktracker.shared.clock import ensure_utc

_SORT_COLUMNS = {
    "title": Task.title,
    "dueDate": Task.due_date,
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "completed": Task.completed,
}

_LIKE_ESCAPE = "\\"


def _to_domain(row: Task) -> DomainTask:
    return DomainTask(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        description=row.description,
        due_date=ensure_utc(row.due_date),
        priority=Priority(row.priority),
        completed=bool(row.completed),
        completed_at=ensure_utc(row.completed_at) if row.completed_at else None,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def _order_by(sort: TaskSort | None) -> list:
    if sort is None:
        return [Task.due_date.asc(), Task.created_at.desc(), Task.id.asc()]
    column = _SORT_COLUMNS.get(sort.field)
    if column is None:
        # priority: stable base order, ranked by the caller
        return [Task.id.asc()]
    ordered = column.desc() if sort.direction == SortDirection.DESC else column.asc()
    return [ordered, Task.id.asc()]


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _owned(self, session: Session, owner_id: int, task_id: int) -> Task | None:
        return session.scalars(
            select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
        ).first()

    def add(self, task: NewTask, now: datetime) -> DomainTask:
        with unit_of_work_scope(self._session_factory) as session:
            row = Task(
                owner_id=task.owner_id,
                title=task.title,
                description=task.description,
                due_date=task.due_date,
                priority=Priority(task.priority).value,
                completed=False,
                completed_at=None,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.flush()
            return _to_domain(row)

    def list(self, query: TaskQuery) -> list[DomainTask]:
        stmt = select(Task).where(Task.owner_id == query.owner_id)
        if query.completed is not None:
            stmt = stmt.where(Task.completed == query.completed)
        if query.priority is not None:
            stmt = stmt.where(Task.priority == Priority(query.priority).value)
        if query.search:
            pattern = _like_pattern(query.search)
            stmt = stmt.where(
                or_(
                    Task.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    Task.description.ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
        stmt = stmt.order_by(*_order_by(query.sort))
        with unit_of_work_scope(self._session_factory) as session:
            return [_to_domain(row) for row in session.scalars(stmt)]

    def update(
        self, owner_id: int, task_id: int, changes: TaskChanges, now: datetime
    ) -> DomainTask | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._owned(session, owner_id, task_id)
            if row is None:
                return None
            if changes.title is not None:
                row.title = changes.title
            if changes.description_set:
                row.description = changes.description
            if changes.due_date is not None:
                row.due_date = changes.due_date
            if changes.priority is not None:
                row.priority = Priority(changes.priority).value
            if changes.completed is not None and changes.completed != bool(row.completed):
                row.completed = changes.completed
                row.completed_at = now if changes.completed else None
            row.updated_at = now
            # validate through the entity before the commit
            updated = _to_domain(row)
            session.flush()
            return updated

    def toggle_complete(self, owner_id: int, task_id: int, now: datetime) -> DomainTask | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._owned(session, owner_id, task_id)
            if row is None:
                return None
            row.completed = not bool(row.completed)
            row.completed_at = now if row.completed else None
            row.updated_at = now
            session.flush()
            return _to_domain(row)

    def delete(self, owner_id: int, task_id: int) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            row = self._owned(session, owner_id, task_id)
            if row is None:
                return False
            session.delete(row)
            return True
