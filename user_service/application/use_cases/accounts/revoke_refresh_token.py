# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for revoking refresh tokens on logout."""

from __future__ import annotations

from user_service.application.services.token_codec import JoseTokenCodec
from user_service.domain.accounts.exceptions import InvalidTokenError
from user_service.domain.accounts.repositories import RevokedTokenRepository
from user_service.domain.accounts.tokens import TokenKind
from user_service.shared.logging import logger
from user_service.shared.result import Err, Ok, Result


class RevokeRefreshTokenUseCase:
    def __init__(self, *, tokens: JoseTokenCodec, revoked: RevokedTokenRepository) -> None:
        self._tokens = tokens
        self._revoked = revoked

    def execute(self, refresh_token: str) -> Result[str]:
        claims = self._tokens.decode(refresh_token, kind=TokenKind.REFRESH)
        if claims is None:
            return Err(InvalidTokenError())
        self._revoked.revoke(claims.token_id, claims.expires_at)
        logger.info(f"accounts.logout: revoked refresh token for user={claims.user_id}")
        return Ok(claims.user_id)
