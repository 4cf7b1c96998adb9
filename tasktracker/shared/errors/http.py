# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Response, jsonify, request
from werkzeug.exceptions import HTTPException

from .base import AppError


def client_ip() -> str:
    """Peer address; ProxyFix rewrites it when trusted proxies are configured."""
    return request.remote_addr or "unknown"


def route_label() -> str:
    """Matched route template, e.g. ``/api/auth/reset-password/<token>``.

    Reset tokens travel in the path, so logs never see the concrete URL.
    """
    rule = request.url_rule
    return rule.rule if rule is not None else "<unmatched>"


def error_response(error: AppError) -> tuple[Response, HTTPStatus]:
    return jsonify(error.to_dict()), error.status


def describe_error(error: AppError) -> str:
    message = f"{request.method} {route_label()} -> {int(error.status)} {error.log_detail()}"
    cause = error.__cause__
    if cause is not None:
        message += f" cause={type(cause).__name__}: {cause}"
    return message


def http_error_response(exc: HTTPException) -> Response:
    """JSON body for werkzeug errors (404, 405, 413, ...) keeping their headers."""
    name = (exc.name or "http error").lower().replace(" ", "_")
    response = jsonify({"error": name})
    response.status_code = exc.code or HTTPStatus.INTERNAL_SERVER_ERROR
    for header, value in exc.get_headers():
        if header.lower() != "content-type":
            response.headers[header] = value
    return response
