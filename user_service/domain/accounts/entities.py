# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

USERINFO_TOPIC = "userinfo"


@dataclass(slots=True, frozen=True)
class Account:
    id: int
    user_id: str
    password_hash: str = field(repr=False)
    phone_number: str
    created_at: datetime

    def to_profile(self) -> ProfileView:
        return ProfileView(
            user_id=self.user_id,
            phone_number=self.phone_number,
            created_at=self.created_at,
        )


@dataclass(slots=True, frozen=True)
class ProfileView:
    """Read projection of an account; carries no credential material."""

    user_id: str
    phone_number: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "phoneNumber": self.phone_number,
            "createdAt": self.created_at.isoformat(),
        }


class AccountAction(str, Enum):
    CREATE = "Create"


@dataclass(slots=True, frozen=True)
class AccountChangeEvent:
    action: AccountAction
    user_id: str
    phone_number: str
    event_time: datetime

    @classmethod
    def for_account(
        cls, action: AccountAction, account: Account, *, now: datetime | None = None
    ) -> AccountChangeEvent:
        return cls(
            action=action,
            user_id=account.user_id,
            phone_number=account.phone_number,
            event_time=now or datetime.now(UTC),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "userId": self.user_id,
            "phoneNumber": self.phone_number,
            "eventTime": self.event_time.isoformat(),
        }
