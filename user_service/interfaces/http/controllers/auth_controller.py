# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from user_service.application.use_cases.accounts import (
    LoginUseCase,
    RefreshAccessTokenUseCase,
    RegisterAccountUseCase,
    RevokeRefreshTokenUseCase,
)
from user_service.domain.accounts.exceptions import (
    InvalidCredentialsError,
    UserNotFoundError,
)
from user_service.infrastructure.audit import AuditAction, audit_log
from user_service.infrastructure.observability import record_outcome
from user_service.interfaces.http.context import gateway_context_from_request
from user_service.interfaces.http.dto.accounts import (
    LoginRequestDTO,
    OkDataDTO,
    OkDTO,
    RegisterRequestDTO,
    TokenRequestDTO,
)
from user_service.shared.errors.validation import raise_validation_error
from user_service.shared.logging import logger
from user_service.shared.middleware.rate_limit import rate_limit
from user_service.shared.middleware.request_logger import client_address


def _parse[D: BaseModel](dto_type: type[D]) -> D:
    try:
        return dto_type.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _ok(data: dict[str, Any] | None = None) -> tuple[Response, int]:
    payload = OkDTO() if data is None else OkDataDTO(data=data)
    return jsonify(payload.model_dump()), 200


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterAccountUseCase,
        login_use_case: LoginUseCase,
        refresh_use_case: RefreshAccessTokenUseCase,
        revoke_use_case: RevokeRefreshTokenUseCase,
        default_device_class: str = "WEB",
        opaque_login_errors: bool = False,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._revoke_use_case = revoke_use_case
        self._default_device_class = default_device_class
        self._opaque_login_errors = opaque_login_errors

    @rate_limit()
    def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)

        result = self._register_use_case.execute(dto.user_id, dto.password, dto.phone_number)
        record_outcome("register", result)
        if not result.ok:
            audit_log(
                AuditAction.REGISTER_FAILED,
                user_id=dto.user_id,
                ip_address=client_address(),
                details={"error": result.error.code},
                success=False,
            )
            result.unwrap()

        audit_log(AuditAction.REGISTER, user_id=dto.user_id, ip_address=client_address())
        logger.info(f"auth.register: ok user_id={dto.user_id}")
        return _ok()

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        context = gateway_context_from_request()
        device_class = context.client_device or self._default_device_class

        result = self._login_use_case.execute(dto.user_id, dto.password, device_class)
        record_outcome("login", result)
        if not result.ok:
            audit_log(
                AuditAction.LOGIN_FAILED,
                user_id=dto.user_id,
                ip_address=client_address(),
                details={"error": result.error.code, "device": device_class},
                success=False,
            )
            if self._opaque_login_errors and isinstance(result.error, UserNotFoundError):
                logger.info(f"auth.login: unknown user_id={dto.user_id} answered as invalid_credentials")
                raise InvalidCredentialsError()
            result.unwrap()

        pair = result.unwrap()
        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=dto.user_id,
            ip_address=client_address(),
            details={"device": device_class},
        )
        logger.info(f"auth.login: ok user_id={dto.user_id} device={device_class}")
        return _ok(pair.to_dict())

    def refresh(self) -> tuple[Response, int]:
        dto = _parse(TokenRequestDTO)

        result = self._refresh_use_case.execute(dto.token)
        record_outcome("refresh", result)
        if not result.ok:
            audit_log(
                AuditAction.TOKEN_REFRESH_FAILED,
                ip_address=client_address(),
                details={"error": result.error.code},
                success=False,
            )
            result.unwrap()

        access = result.unwrap()
        audit_log(AuditAction.TOKEN_REFRESHED, user_id=access.user_id, ip_address=client_address())
        return _ok(access.to_dict())

    def logout(self) -> tuple[Response, int]:
        dto = _parse(TokenRequestDTO)

        result = self._revoke_use_case.execute(dto.token)
        record_outcome("logout", result)
        user_id = result.unwrap()

        audit_log(AuditAction.LOGOUT, user_id=user_id, ip_address=client_address())
        logger.info(f"auth.logout: ok user_id={user_id}")
        return _ok()

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/user/v1/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        return bp


__all__ = ["AuthController"]
