# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.domain.accounts.entities import ProfileView
from user_service.domain.accounts.exceptions import UserNotFoundError
from user_service.domain.accounts.repositories import AccountRepository
from user_service.shared.result import Err, Ok, Result


class GetProfileUseCase:
    def __init__(self, *, accounts: AccountRepository) -> None:
        self._accounts = accounts

    def execute(self, user_id: str) -> Result[ProfileView]:
        account = self._accounts.find_by_user_id(user_id)
        if account is None:
            return Err(UserNotFoundError(context={"user_id": user_id}))
        return Ok(account.to_profile())
