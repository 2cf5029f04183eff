# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True, frozen=True)
class TokenClaims:
    user_id: str
    device_class: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime
    token_id: str


@dataclass(slots=True, frozen=True)
class IssuedToken:
    token: str = field(repr=False)
    claims: TokenClaims

    @property
    def kind(self) -> TokenKind:
        return self.claims.kind

    @property
    def user_id(self) -> str:
        return self.claims.user_id

    @property
    def issued_at(self) -> datetime:
        return self.claims.issued_at

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at

    @property
    def expires_in(self) -> int:
        return round((self.claims.expires_at - self.claims.issued_at).total_seconds())

    def to_dict(self) -> dict[str, object]:
        return {"token": self.token, "expiresIn": self.expires_in}


@dataclass(slots=True, frozen=True)
class AccessRefreshPair:
    access: IssuedToken
    refresh: IssuedToken

    def to_dict(self) -> dict[str, object]:
        return {"access": self.access.to_dict(), "refresh": self.refresh.to_dict()}
