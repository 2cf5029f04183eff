# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
_PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9 ()-]{4,30}$")


class _RequestDTO(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True, extra="ignore")


def _check_user_id(value: str) -> str:
    if not _USER_ID_PATTERN.match(value):
        raise PydanticCustomError(
            "user_id_invalid_chars",
            "User id must start with a letter or digit and contain only letters, digits, '.', '_' or '-'",
            {"pattern": _USER_ID_PATTERN.pattern},
        )
    return value


class RegisterRequestDTO(_RequestDTO):
    user_id: str = Field(alias="userId", min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)
    phone_number: str = Field(alias="phoneNumber", min_length=5, max_length=32)

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, value: str) -> str:
        return _check_user_id(value)

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        value = value.strip()
        if not _PHONE_PATTERN.match(value):
            raise PydanticCustomError(
                "phone_number_invalid",
                "Phone number must contain only digits, spaces, '(', ')', '-' and an optional leading '+'",
                {},
            )
        return value


class LoginRequestDTO(_RequestDTO):
    user_id: str = Field(alias="userId", min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class TokenRequestDTO(_RequestDTO):
    token: str = Field(min_length=1, max_length=4096)


class OkDTO(BaseModel):
    ok: bool = True


class OkDataDTO(OkDTO):
    data: dict[str, Any]


__all__ = [
    "LoginRequestDTO",
    "OkDTO",
    "OkDataDTO",
    "RegisterRequestDTO",
    "TokenRequestDTO",
]
