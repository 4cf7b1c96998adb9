from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tasktracker.domain.tasks.entities import (
    NewTask,
    Priority,
    TaskChanges,
    TaskQuery,
    TaskSort,
)
from tasktracker.infrastructure.repositories.tasks.sqlalchemy_task_repository import (
    SqlAlchemyTaskRepository,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
OWNER = 1
STRANGER = 2


@pytest.fixture()
def repo(sqlite_session_factory) -> SqlAlchemyTaskRepository:
    return SqlAlchemyTaskRepository(sqlite_session_factory)


def _add(repo, title: str, *, days: int = 1, priority=Priority.MEDIUM, owner=OWNER,
         description: str | None = None, created=NOW):
    return repo.add(
        NewTask(
            owner_id=owner,
            title=title,
            description=description,
            due_date=NOW + timedelta(days=days),
            priority=priority,
        ),
        created,
    )


def _titles(tasks) -> list[str]:
    return [task.title for task in tasks]


def _find(repo: SqlAlchemyTaskRepository, owner: int, task_id: int):
    return next((t for t in repo.list(TaskQuery(owner_id=owner)) if t.id == task_id), None)


def test_add_returns_open_task(repo: SqlAlchemyTaskRepository) -> None:
    task = _add(repo, "Write report", priority=Priority.HIGH)

    assert task.id > 0
    assert task.completed is False
    assert task.completed_at is None
    assert task.priority is Priority.HIGH
    assert task.created_at == task.updated_at == NOW
    assert _find(repo, OWNER, task.id) == task


def test_default_order_is_due_date_then_newest(repo: SqlAlchemyTaskRepository) -> None:
    _add(repo, "later", days=3)
    _add(repo, "soon-old", days=1, created=NOW)
    _add(repo, "soon-new", days=1, created=NOW + timedelta(hours=1))

    assert _titles(repo.list(TaskQuery(owner_id=OWNER))) == ["soon-new", "soon-old", "later"]


def test_sort_by_title_desc(repo: SqlAlchemyTaskRepository) -> None:
    for title in ("b", "c", "a"):
        _add(repo, title)

    query = TaskQuery(owner_id=OWNER, sort=TaskSort.parse("title:desc"))
    assert _titles(repo.list(query)) == ["c", "b", "a"]


def test_filters_by_completion_and_priority(repo: SqlAlchemyTaskRepository) -> None:
    done = _add(repo, "done", priority=Priority.LOW)
    _add(repo, "open-low", priority=Priority.LOW)
    _add(repo, "open-high", priority=Priority.HIGH)
    repo.toggle_complete(OWNER, done.id, NOW)

    assert _titles(repo.list(TaskQuery(owner_id=OWNER, completed=True))) == ["done"]
    low_open = TaskQuery(owner_id=OWNER, completed=False, priority=Priority.LOW)
    assert _titles(repo.list(low_open)) == ["open-low"]


def test_search_is_case_insensitive_and_literal(repo: SqlAlchemyTaskRepository) -> None:
    _add(repo, "Buy MILK")
    _add(repo, "Call bob", description="about 100% of the budget")
    _add(repo, "Unrelated")

    assert _titles(repo.list(TaskQuery(owner_id=OWNER, search="milk"))) == ["Buy MILK"]
    assert _titles(repo.list(TaskQuery(owner_id=OWNER, search="100%"))) == ["Call bob"]
    assert repo.list(TaskQuery(owner_id=OWNER, search="%")) != []
    assert repo.list(TaskQuery(owner_id=OWNER, search="b_y")) == []


def test_tasks_are_scoped_to_owner(repo: SqlAlchemyTaskRepository) -> None:
    task = _add(repo, "mine")
    _add(repo, "theirs", owner=STRANGER)

    assert _titles(repo.list(TaskQuery(owner_id=OWNER))) == ["mine"]
    assert _find(repo, STRANGER, task.id) is None
    assert repo.update(STRANGER, task.id, TaskChanges(title="hijack"), NOW) is None
    assert repo.toggle_complete(STRANGER, task.id, NOW) is None
    assert repo.delete(STRANGER, task.id) is False
    assert _find(repo, OWNER, task.id).title == "mine"


def test_update_is_partial(repo: SqlAlchemyTaskRepository) -> None:
    task = _add(repo, "draft", description="keep me")
    later = NOW + timedelta(hours=2)

    updated = repo.update(OWNER, task.id, TaskChanges(title="final"), later)

    assert updated.title == "final"
    assert updated.description == "keep me"
    assert updated.updated_at == later
    cleared = repo.update(OWNER, task.id, TaskChanges(description_set=True), later)
    assert cleared.description is None


def test_completion_maintains_completed_at(repo: SqlAlchemyTaskRepository) -> None:
    task = _add(repo, "chore")
    later = NOW + timedelta(hours=1)

    done = repo.update(OWNER, task.id, TaskChanges(completed=True), later)
    assert done.completed is True
    assert done.completed_at == later

    reopened = repo.toggle_complete(OWNER, task.id, later + timedelta(minutes=1))
    assert reopened.completed is False
    assert reopened.completed_at is None


def test_delete_removes_task(repo: SqlAlchemyTaskRepository) -> None:
    task = _add(repo, "temp")

    assert repo.delete(OWNER, task.id) is True
    assert _find(repo, OWNER, task.id) is None
    assert repo.delete(OWNER, task.id) is False
