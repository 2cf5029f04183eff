# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Account, AccountChangeEvent


class AccountRepository(Protocol):
    def find_by_user_id(self, user_id: str) -> Account | None: ...
    def exists(self, user_id: str) -> bool: ...
    def add_if_absent(self, account: Account) -> Account | None: ...


class RevokedTokenRepository(Protocol):
    def revoke(self, token_id: str, expires_at: datetime) -> None: ...
    def is_revoked(self, token_id: str) -> bool: ...
    def purge_expired(self, now: datetime) -> int: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class EventPublisher(Protocol):
    def publish(self, topic: str, event: AccountChangeEvent) -> None: ...
