# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import os
from datetime import UTC, datetime

from flask import Flask

from user_service.application.services.password_hashing import ensure_hasher_ready
from user_service.infrastructure.container import Container
from user_service.infrastructure.db import SessionLocal, init_db
from user_service.shared.logging import logger, setup_logging
from user_service.shared.middleware.error_handler import configure_error_handling
from user_service.shared.middleware.request_logger import configure_request_logging


def _start_event_publisher(container: Container) -> None:
    publisher = container.background_event_publisher
    publisher.start()
    atexit.register(publisher.stop)


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(debug_mode=config.debug_logging, service=config.observability.service_name)
    init_db()
    ensure_hasher_ready(container.password_hasher)

    purged = container.revoked_token_repository.purge_expired(datetime.now(UTC))
    if purged:
        logger.info(f"tokens: purged {purged} expired revocations")

    if config.events.enabled:
        _start_event_publisher(container)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)

    app.register_blueprint(container.probe_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.profile_controller.as_blueprint())

    @app.teardown_appcontext
    def _remove_session(_exc: BaseException | None) -> None:
        SessionLocal.remove()

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info(f"{config.observability.service_name} initialized (env={config.app_env})")
    return app


if __name__ == "__main__":
    create_app().run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )
