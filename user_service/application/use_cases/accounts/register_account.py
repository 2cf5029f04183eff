# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from user_service.domain.accounts.entities import (
    USERINFO_TOPIC,
    Account,
    AccountAction,
    AccountChangeEvent,
)
from user_service.domain.accounts.exceptions import DuplicateUserError
from user_service.domain.accounts.repositories import (
    AccountRepository,
    EventPublisher,
    PasswordHasher,
)
from user_service.shared.logging import logger
from user_service.shared.result import Err, Ok, Result


class RegisterAccountUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        password_hasher: PasswordHasher,
        events: EventPublisher,
        topic: str = USERINFO_TOPIC,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._events = events
        self._topic = topic

    def execute(self, user_id: str, password: str, phone_number: str) -> Result[Account]:
        # Skips hashing for the common duplicate case; add_if_absent is the real guard.
        if self._accounts.exists(user_id):
            return Err(DuplicateUserError(context={"user_id": user_id}))

        account = Account(
            id=0,
            user_id=user_id,
            password_hash=self._password_hasher.hash(password),
            phone_number=phone_number,
            created_at=datetime.now(UTC),
        )
        persisted = self._accounts.add_if_absent(account)
        if persisted is None:
            logger.info(f"accounts.register: lost insert race for user={user_id}")
            return Err(DuplicateUserError(context={"user_id": user_id}))

        self._emit(AccountChangeEvent.for_account(AccountAction.CREATE, persisted))
        logger.info(f"accounts.register: created user={persisted.user_id} id={persisted.id}")
        return Ok(persisted)

    def _emit(self, event: AccountChangeEvent) -> None:
        try:
            self._events.publish(self._topic, event)
        except Exception:
            logger.exception(
                f"accounts.register: event publish failed for user={event.user_id}"
            )
