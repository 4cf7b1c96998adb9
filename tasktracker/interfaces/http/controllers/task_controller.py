# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from tasktracker.application.use_cases.tasks.create_task import CreateTaskUseCase
from tasktracker.application.use_cases.tasks.delete_task import DeleteTaskUseCase
from tasktracker.application.use_cases.tasks.list_tasks import ListTasksUseCase
from tasktracker.application.use_cases.tasks.update_task import (
    ToggleTaskCompleteUseCase,
    UpdateTaskUseCase,
)
from tasktracker.domain.tasks.entities import NewTask
from tasktracker.interfaces.http.dto.tasks import CreateTaskDTO, ListTasksQueryDTO, UpdateTaskDTO
from tasktracker.interfaces.http.session_guard import SessionGuard
from tasktracker.shared.errors.validation import raise_validation_error
from tasktracker.shared.logging import logger


class TaskController:
    def __init__(
        self,
        *,
        create_use_case: CreateTaskUseCase,
        list_use_case: ListTasksUseCase,
        update_use_case: UpdateTaskUseCase,
        toggle_use_case: ToggleTaskCompleteUseCase,
        delete_use_case: DeleteTaskUseCase,
        guard: SessionGuard,
    ) -> None:
        self._create_use_case = create_use_case
        self._list_use_case = list_use_case
        self._update_use_case = update_use_case
        self._toggle_use_case = toggle_use_case
        self._delete_use_case = delete_use_case
        self._guard = guard

    def create(self) -> tuple[Response, int]:
        try:
            dto = CreateTaskDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        task = self._create_use_case.execute(
            NewTask(
                owner_id=g.user_id,
                title=dto.title,
                description=dto.description,
                due_date=dto.due_date,
                priority=dto.priority,
            )
        )
        logger.info(f"tasks.create: ok user_id={g.user_id} task_id={task.id}")
        return jsonify({"success": True, "data": task.to_public()}), 201

    def list(self) -> tuple[Response, int]:
        try:
            dto = ListTasksQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        tasks = self._list_use_case.execute(dto.to_query(g.user_id))
        payload = {
            "success": True,
            "count": len(tasks),
            "data": [task.to_public() for task in tasks],
        }
        return jsonify(payload), 200

    def update(self, task_id: int) -> tuple[Response, int]:
        try:
            dto = UpdateTaskDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        task = self._update_use_case.execute(g.user_id, task_id, dto.to_changes())
        return jsonify({"success": True, "data": task.to_public()}), 200

    def toggle_complete(self, task_id: int) -> tuple[Response, int]:
        task = self._toggle_use_case.execute(g.user_id, task_id)
        return jsonify({"success": True, "data": task.to_public()}), 200

    def delete(self, task_id: int) -> tuple[Response, int]:
        self._delete_use_case.execute(g.user_id, task_id)
        payload = {"success": True, "message": "Task deleted", "data": {"id": task_id}}
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        guard = self._guard
        bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")
        bp.add_url_rule("", view_func=guard(self.create), methods=["POST"])
        bp.add_url_rule("", view_func=guard(self.list), methods=["GET"])
        bp.add_url_rule("/<int:task_id>", view_func=guard(self.update), methods=["PUT"])
        bp.add_url_rule("/<int:task_id>", view_func=guard(self.delete), methods=["DELETE"])
        bp.add_url_rule(
            "/<int:task_id>/toggle-complete",
            view_func=guard(self.toggle_complete),
            methods=["PUT"],
        )
        return bp
