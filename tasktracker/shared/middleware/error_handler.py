# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from tasktracker.shared.config import load_config
from tasktracker.shared.errors import AppError
from tasktracker.shared.errors.http import (
    client_ip,
    describe_error,
    error_response,
    http_error_response,
    route_label,
)
from tasktracker.shared.logging import logger


def configure_error_handling(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(describe_error(exc))
        else:
            logger.warning(describe_error(exc))
        return error_response(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return http_error_response(exc)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if verbose:
            logger.exception(
                f"unhandled {type(exc).__name__} on {route_label()} "
                f"ip={client_ip()} user_id={getattr(g, 'user_id', None)}"
            )
        else:
            logger.error(f"unhandled {type(exc).__name__} on {route_label()}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR
