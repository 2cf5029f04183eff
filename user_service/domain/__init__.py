# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .accounts.context import GatewayContext
from .accounts.entities import (
    USERINFO_TOPIC,
    Account,
    AccountAction,
    AccountChangeEvent,
    ProfileView,
)
from .accounts.tokens import AccessRefreshPair, IssuedToken, TokenClaims, TokenKind

__all__ = [
    "USERINFO_TOPIC",
    "AccessRefreshPair",
    "Account",
    "AccountAction",
    "AccountChangeEvent",
    "GatewayContext",
    "IssuedToken",
    "ProfileView",
    "TokenClaims",
    "TokenKind",
]
