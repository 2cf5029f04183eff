# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.application.services.token_codec import JoseTokenCodec
from user_service.domain.accounts.exceptions import (
    InvalidCredentialsError,
    UserNotFoundError,
)
from user_service.domain.accounts.repositories import AccountRepository, PasswordHasher
from user_service.domain.accounts.tokens import AccessRefreshPair
from user_service.shared.logging import logger
from user_service.shared.result import Err, Ok, Result


class LoginUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        password_hasher: PasswordHasher,
        tokens: JoseTokenCodec,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._tokens = tokens
        # Verified against when the user id is unknown.
        self._dummy_hash = password_hasher.hash("login-timing-placeholder")

    def execute(
        self, user_id: str, password: str, device_class: str
    ) -> Result[AccessRefreshPair]:
        account = self._accounts.find_by_user_id(user_id)
        if account is None:
            # Same hashing cost as a real attempt, so timing does not reveal unknown ids.
            self._password_hasher.verify(password, self._dummy_hash)
            logger.info(f"accounts.login: unknown user={user_id}")
            return Err(UserNotFoundError(context={"user_id": user_id}))

        if not self._password_hasher.verify(password, account.password_hash):
            logger.info(f"accounts.login: password mismatch user={user_id}")
            return Err(InvalidCredentialsError())

        pair = self._tokens.issue_access_refresh_pair(account.user_id, device_class)
        logger.info(f"accounts.login: ok user={user_id} device={device_class}")
        return Ok(pair)

