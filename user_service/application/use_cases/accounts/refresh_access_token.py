# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from user_service.application.services.token_codec import JoseTokenCodec
from user_service.domain.accounts.exceptions import InvalidTokenError, UserNotFoundError
from user_service.domain.accounts.repositories import (
    AccountRepository,
    RevokedTokenRepository,
)
from user_service.domain.accounts.tokens import IssuedToken, TokenKind
from user_service.shared.logging import logger
from user_service.shared.result import Err, Ok, Result


class RefreshAccessTokenUseCase:
    """Mint a new access token from a refresh token.

    The refresh token is not rotated; it stays usable until it expires or is
    revoked through logout.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepository,
        tokens: JoseTokenCodec,
        revoked: RevokedTokenRepository | None = None,
    ) -> None:
        self._accounts = accounts
        self._tokens = tokens
        self._revoked = revoked

    def execute(self, refresh_token: str) -> Result[IssuedToken]:
        claims = self._tokens.decode(refresh_token, kind=TokenKind.REFRESH)
        if claims is None:
            logger.info("accounts.refresh: rejected refresh token")
            return Err(InvalidTokenError())

        if self._revoked is not None and self._revoked.is_revoked(claims.token_id):
            logger.warning(
                f"accounts.refresh: revoked token presented user={claims.user_id} "
                f"jti={claims.token_id}"
            )
            return Err(InvalidTokenError())

        if self._accounts.find_by_user_id(claims.user_id) is None:
            logger.info(f"accounts.refresh: user={claims.user_id} no longer exists")
            return Err(UserNotFoundError(context={"user_id": claims.user_id}))

        access = self._tokens.issue_access_token(
            claims.user_id, claims.device_class, issued_after=claims.issued_at
        )
        logger.info(f"accounts.refresh: ok user={claims.user_id} device={claims.device_class}")
        return Ok(access)
