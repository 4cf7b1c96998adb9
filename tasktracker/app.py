# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
from typing import Any, Protocol, cast

from flask import Flask, Response
from werkzeug.middleware.proxy_fix import ProxyFix

from tasktracker.infrastructure.container import Container
from tasktracker.infrastructure.container import container as default_container
from tasktracker.infrastructure.db import init_db
from tasktracker.shared.config import AppConfig
from tasktracker.shared.logging import logger, setup_logging
from tasktracker.shared.middleware.error_handler import configure_error_handling
from tasktracker.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)

_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Cache-Control": "no-store",
}
_HSTS = "max-age=31536000; includeSubDomains"


def _install_security_headers(app: Flask, config: AppConfig) -> None:
    @app.after_request
    def _security_headers(response: Response) -> Response:
        for name, value in _SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if config.security.enable_hsts:
            response.headers.setdefault("Strict-Transport-Security", _HSTS)
        return response


def _install_cors(app: Flask, config: AppConfig) -> None:
    origins = config.security.allowed_origins
    # browsers reject credentialed responses for a wildcard origin
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials="*" not in origins,
    )


def create_app(container: Container | None = None) -> Flask:
    container = container or default_container
    config = container.config

    setup_logging(config.log_level, config.log_file)
    init_db()

    app = Flask(__name__)
    proxies = config.security.trusted_proxy_count
    if proxies:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxies, x_proto=proxies)  # type: ignore[method-assign]
    app.config.update(SECRET_KEY=config.secret_key, JSON_SORT_KEYS=False)
    configure_error_handling(app)
    configure_request_logging(app)
    _install_cors(app, config)
    _install_security_headers(app, config)

    for controller in (
        container.misc_controller,
        container.auth_controller,
        container.task_controller,
    ):
        app.register_blueprint(controller.as_blueprint())

    logger.info(f"tasktracker ready env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)
