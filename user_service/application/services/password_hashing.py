# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from user_service.domain.accounts.exceptions import HashingFailureError
from user_service.domain.accounts.repositories import PasswordHasher
from user_service.shared.logging import logger

_PROBE = "hasher-self-check"


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted one-way hashing backed by werkzeug (scrypt unless configured otherwise).

    Digests are self-describing (``method$salt$hash``) so the salt travels with
    the stored value and the method can change without touching callers.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        return str(
            generate_password_hash(password, method=self._method, salt_length=self._salt_length)
        )

    def verify(self, password: str, hashed: str) -> bool:
        if not isinstance(password, str) or not isinstance(hashed, str) or not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError) as exc:
            logger.debug(f"hasher: malformed digest rejected ({type(exc).__name__})")
            return False


def ensure_hasher_ready(hasher: PasswordHasher) -> None:
    """Fail start-up when the configured algorithm cannot hash or verify."""

    try:
        digest = hasher.hash(_PROBE)
        verified = hasher.verify(_PROBE, digest)
    except Exception as exc:
        logger.critical(f"hasher: self-check failed: {type(exc).__name__}: {exc}")
        raise HashingFailureError(str(exc)) from exc
    if not verified:
        logger.critical("hasher: self-check digest did not verify")
        raise HashingFailureError("probe digest did not verify")
    logger.info("hasher: self-check ok")


__all__ = ["WerkzeugPasswordHasher", "ensure_hasher_ready"]
