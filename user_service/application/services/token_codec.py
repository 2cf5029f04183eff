# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed access/refresh token issuing and validation.

Tokens are self-contained JWTs carrying ``sub``, ``device``, ``typ``, ``iat``,
``exp`` and ``jti``; they are verified without any server-side lookup.
Validation never raises for untrusted input: every failure (bad signature,
malformed payload, wrong kind, expiry) collapses to ``None``.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from user_service.domain.accounts.tokens import (
    AccessRefreshPair,
    IssuedToken,
    TokenClaims,
    TokenKind,
)
from user_service.shared.logging import logger

Clock = Callable[[], datetime]

_REQUIRED_CLAIMS = ("sub", "device", "typ", "iat", "exp", "jti")
# Smallest step datetime can represent; NumericDate claims are fractional.
_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JoseTokenCodec:
    def __init__(
        self,
        *,
        secret: str,
        refresh_secret: str | None = None,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=30),
        refresh_ttl: timedelta = timedelta(days=14),
        leeway: timedelta = timedelta(0),
        clock: Clock = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._keys = {
            TokenKind.ACCESS: secret,
            TokenKind.REFRESH: refresh_secret or secret,
        }
        self._ttls = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self._algorithm = algorithm
        self._leeway = leeway
        self._clock = clock

    def issue_access_token(
        self, user_id: str, device_class: str, *, issued_after: datetime | None = None
    ) -> IssuedToken:
        issued_at = self._now()
        if issued_after is not None and issued_at <= issued_after:
            issued_at = issued_after + _TICK
        return self._issue(TokenKind.ACCESS, user_id, device_class, issued_at)

    def issue_refresh_token(self, user_id: str, device_class: str) -> IssuedToken:
        return self._issue(TokenKind.REFRESH, user_id, device_class, self._now())

    def issue_access_refresh_pair(self, user_id: str, device_class: str) -> AccessRefreshPair:
        issued_at = self._now()
        return AccessRefreshPair(
            access=self._issue(TokenKind.ACCESS, user_id, device_class, issued_at),
            refresh=self._issue(TokenKind.REFRESH, user_id, device_class, issued_at),
        )

    def decode(self, token: object, *, kind: TokenKind | None = None) -> TokenClaims | None:
        if not isinstance(token, str) or not token:
            return None

        kinds = (kind,) if kind is not None else tuple(TokenKind)
        for candidate in kinds:
            claims = self._decode_with(token, candidate)
            if claims is not None:
                return claims
        return None

    def validate(self, token: object) -> str | None:
        claims = self.decode(token)
        return claims.user_id if claims else None

    def _now(self) -> datetime:
        return self._clock().astimezone(UTC)

    def _issue(
        self, kind: TokenKind, user_id: str, device_class: str, issued_at: datetime
    ) -> IssuedToken:
        expires_at = issued_at + self._ttls[kind]
        claims = TokenClaims(
            user_id=user_id,
            device_class=device_class,
            kind=kind,
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=uuid.uuid4().hex,
        )
        payload = {
            "sub": user_id,
            "device": device_class,
            "typ": kind.value,
            "iat": issued_at.timestamp(),
            "exp": expires_at.timestamp(),
            "jti": claims.token_id,
        }
        token = jwt.encode(payload, self._keys[kind], algorithm=self._algorithm)
        logger.debug(
            f"tokens: issued {kind.value} for user={user_id} device={device_class} "
            f"exp={expires_at.isoformat()}"
        )
        return IssuedToken(token=token, claims=claims)

    def _decode_with(self, token: str, kind: TokenKind) -> TokenClaims | None:
        try:
            payload = jwt.decode(
                token,
                self._keys[kind],
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_aud": False},
            )
        except JWTError as exc:
            logger.debug(f"tokens: rejected {kind.value} candidate: {exc}")
            return None
        except (ValueError, TypeError, AttributeError) as exc:
            logger.debug(f"tokens: malformed token: {type(exc).__name__}")
            return None

        claims = _claims_from_payload(payload)
        if claims is None or claims.kind is not kind:
            logger.debug(f"tokens: payload is not a well-formed {kind.value} token")
            return None

        if self._now() >= claims.expires_at + self._leeway:
            logger.debug(f"tokens: {kind.value} token for user={claims.user_id} expired")
            return None
        return claims


def _claims_from_payload(payload: Any) -> TokenClaims | None:
    if not isinstance(payload, dict) or any(name not in payload for name in _REQUIRED_CLAIMS):
        return None
    sub, device, typ = payload["sub"], payload["device"], payload["typ"]
    iat, exp, jti = payload["iat"], payload["exp"], payload["jti"]
    if not all(isinstance(value, str) and value for value in (sub, device, typ, jti)):
        return None
    if not all(
        isinstance(value, int | float) and not isinstance(value, bool) for value in (iat, exp)
    ):
        return None
    try:
        kind = TokenKind(typ)
        issued_at = datetime.fromtimestamp(iat, UTC)
        expires_at = datetime.fromtimestamp(exp, UTC)
    except (ValueError, OverflowError, OSError):
        return None
    return TokenClaims(
        user_id=sub,
        device_class=device,
        kind=kind,
        issued_at=issued_at,
        expires_at=expires_at,
        token_id=jti,
    )


__all__ = ["Clock", "JoseTokenCodec"]
