# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .get_profile import GetProfileUseCase
from .login import LoginUseCase
from .refresh_access_token import RefreshAccessTokenUseCase
from .register_account import RegisterAccountUseCase
from .revoke_refresh_token import RevokeRefreshTokenUseCase

__all__ = [
    "GetProfileUseCase",
    "LoginUseCase",
    "RefreshAccessTokenUseCase",
    "RegisterAccountUseCase",
    "RevokeRefreshTokenUseCase",
]
