# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from user_service.application.use_cases.accounts import GetProfileUseCase
from user_service.infrastructure.audit import AuditAction, audit_log
from user_service.infrastructure.observability import record_outcome
from user_service.interfaces.http.context import gateway_context_from_request
from user_service.interfaces.http.dto.accounts import OkDataDTO


class ProfileController:
    def __init__(self, *, get_profile_use_case: GetProfileUseCase) -> None:
        self._get_profile_use_case = get_profile_use_case

    def profile(self) -> tuple[Response, int]:
        context = gateway_context_from_request()
        user_id = context.require_user_id().unwrap()

        result = self._get_profile_use_case.execute(user_id)
        record_outcome("profile", result)
        profile = result.unwrap()

        audit_log(AuditAction.PROFILE_VIEWED, user_id=user_id, ip_address=context.client_address)
        return jsonify(OkDataDTO(data=profile.to_dict()).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("profile", __name__, url_prefix="/api/user/v1")
        bp.add_url_rule("/profile", view_func=self.profile, methods=["GET"])
        return bp


__all__ = ["ProfileController"]
