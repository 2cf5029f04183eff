# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Tagged success/error results returned by the account use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

from user_service.shared.errors.base import AppError


@dataclass(slots=True, frozen=True)
class Ok[T]:
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True, frozen=True)
class Err:
    error: AppError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error


type Result[T] = Ok[T] | Err


__all__ = ["Err", "Ok", "Result"]
