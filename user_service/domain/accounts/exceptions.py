# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from user_service.shared.errors.base import DomainError, InfrastructureError


class DuplicateUserError(DomainError):
    code = "duplicate_user"
    status = HTTPStatus.CONFLICT
    message = "User id is already registered."


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found."


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Password does not match."


class InvalidTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.FORBIDDEN
    message = "Token is invalid."


class MissingContextError(DomainError):
    code = "missing_context"
    status = HTTPStatus.BAD_REQUEST

    def __init__(self, header: str) -> None:
        super().__init__(
            context={"header": header},
            message=f"Request is missing the {header} header.",
        )


class HashingFailureError(InfrastructureError):
    def __init__(self, reason: str) -> None:
        super().__init__(
            code="hashing_failure",
            context={"reason": reason},
            message="Password hashing is unavailable.",
        )
