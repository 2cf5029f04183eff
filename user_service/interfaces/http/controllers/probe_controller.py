# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError

from user_service.infrastructure.health import check_database
from user_service.shared.logging import logger


class ProbeController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("probe", __name__, url_prefix="/backend/user/v1")
        bp.add_url_rule("/k8s/liveness", view_func=self.liveness, methods=["GET"])
        bp.add_url_rule("/k8s/readiness", view_func=self.readiness, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def liveness(self):
        return jsonify({"ok": True})

    def readiness(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database()
            status["database"] = "ok"
        except SQLAlchemyError as exc:
            logger.error(f"probe.readiness: database unavailable: {type(exc).__name__}")
            status["ok"] = False
            status["database"] = "unavailable"
            return jsonify(status), 503
        return jsonify(status), 200

    def metrics(self) -> Response:
        return Response(generate_latest(), content_type=CONTENT_TYPE_LATEST)


__all__ = ["ProbeController"]
