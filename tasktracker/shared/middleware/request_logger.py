# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
import secrets
import time

from flask import Flask, g, request

from tasktracker.shared.config import load_config
from tasktracker.shared.errors.http import client_ip, route_label
from tasktracker.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _incoming_request_id() -> str:
    candidate = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return secrets.token_urlsafe(8)


def _credential_source() -> str:
    if request.cookies.get(load_config().session.cookie_name):
        return "cookie"
    if request.headers.get("Authorization", "").startswith("Bearer "):
        return "bearer"
    return "none"


def configure_request_logging(app: Flask) -> None:
    verbose = load_config().debug_logging

    @app.before_request
    def _start() -> None:
        g.request_id = _incoming_request_id()
        set_correlation_id(g.request_id)
        g.request_started = time.perf_counter()
        if verbose:
            logger.debug(
                f"-> {request.method} {route_label()} ip={client_ip()} "
                f"credentials={_credential_source()} query_keys={sorted(request.args)} "
                f"body_size={request.content_length or 0}"
            )

    @app.after_request
    def _finish(response):
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        logger.info(
            f"{request.method} {route_label()} status={response.status_code} "
            f"duration={elapsed * 1000:.1f}ms user_id={g.get('user_id')}"
        )
        response.headers[REQUEST_ID_HEADER] = g.get("request_id", "")
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request aborted: {type(exc).__name__} on {route_label()}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
