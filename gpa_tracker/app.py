# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import importlib
import threading

from flask import Flask
from typing import Any, Protocol, cast

from gpa_tracker.infrastructure.container import container
from gpa_tracker.infrastructure.db import init_db
from gpa_tracker.infrastructure.observability import configure_metrics
from gpa_tracker.interfaces.http.controllers.misc_controller import MiscController
from gpa_tracker.shared.config import load_config
from gpa_tracker.shared.logging import logger, setup_logging
from gpa_tracker.shared.middleware.error_handler import configure_error_handling
from gpa_tracker.shared.middleware.request_logger import configure_request_logging

class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


_config = load_config()
_SWEEPER_STARTED = threading.Event()


def _start_reset_sweeper() -> None:
    if _SWEEPER_STARTED.is_set():
        return
    _SWEEPER_STARTED.set()
    container.reset_token_sweeper.start()
    atexit.register(container.reset_token_sweeper.stop)


def create_app() -> Flask:
    init_db()
    setup_logging("DEBUG" if _config.debug_logging else None)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)
    configure_metrics(app)

    app.config.update(SECRET_KEY=_config.secret_key)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": _config.security.allowed_origins}}
    }
    CORS(app, **cors_kwargs)
    app.register_blueprint(MiscController().as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.records_controller.as_blueprint())

    if _config.reset.sweeper_enabled:
        _start_reset_sweeper()

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=(), magnetometer=(), gyroscope=()",
        )

        if _config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=_config.debug_logging)
