from __future__ import annotations

from flask import Flask, jsonify

from tasktracker.shared.middleware.error_handler import configure_error_handling


def _app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)

    @app.get("/api/tasks/<int:task_id>")
    def show(task_id: int):
        return jsonify({"id": task_id})

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    return app


def test_unmatched_route_is_json_404() -> None:
    with _app().test_client() as client:
        response = client.get("/api/tasks/abc")

    assert response.status_code == 404
    assert response.is_json
    assert response.get_json() == {"error": "not_found"}


def test_wrong_method_is_json_405_with_allow_header() -> None:
    with _app().test_client() as client:
        response = client.delete("/api/tasks/1")

    assert response.status_code == 405
    assert response.get_json() == {"error": "method_not_allowed"}
    assert "GET" in response.headers["Allow"]


def test_unexpected_exception_hides_details() -> None:
    with _app().test_client() as client:
        response = client.get("/api/boom")

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}
    assert b"hunter2" not in response.data
