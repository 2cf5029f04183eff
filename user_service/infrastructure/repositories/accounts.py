# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from user_service.domain.accounts.entities import Account
from user_service.domain.accounts.repositories import (
    AccountRepository,
    RevokedTokenRepository,
)
from user_service.infrastructure.db.models import RevokedToken, SiteUser
from user_service.infrastructure.unit_of_work import unit_of_work_scope
from user_service.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain(row: SiteUser) -> Account:
    return Account(
        id=row.id,
        user_id=row.user_id,
        password_hash=row.password_hash,
        phone_number=row.phone_number,
        created_at=_as_utc(row.created_at),
    )


class SqlAlchemyAccountRepository(AccountRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_user_id(self, user_id: str) -> Account | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(select(SiteUser).where(SiteUser.user_id == user_id)).first()
            return _to_domain(row) if row else None

    def exists(self, user_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            found = session.scalar(select(SiteUser.id).where(SiteUser.user_id == user_id))
            return found is not None

    def add_if_absent(self, account: Account) -> Account | None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = SiteUser(
                    user_id=account.user_id,
                    password_hash=account.password_hash,
                    phone_number=account.phone_number,
                    created_at=account.created_at,
                )
                session.add(row)
                session.flush()
                persisted = _to_domain(row)
        except IntegrityError:
            logger.info(f"accounts.repo: user_id={account.user_id} already present")
            return None
        return persisted


class SqlAlchemyRevokedTokenRepository(RevokedTokenRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                if session.get(RevokedToken, token_id) is None:
                    session.add(RevokedToken(token_id=token_id, expires_at=expires_at))
                    session.flush()
        except IntegrityError:
            logger.debug(f"revoked.repo: jti={token_id} already revoked")

    def is_revoked(self, token_id: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            return session.get(RevokedToken, token_id) is not None

    def purge_expired(self, now: datetime) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(delete(RevokedToken).where(RevokedToken.expires_at < now))
            removed = result.rowcount or 0
        if removed:
            logger.info(f"revoked.repo: purged {removed} expired entries")
        return removed


__all__ = ["SqlAlchemyAccountRepository", "SqlAlchemyRevokedTokenRepository"]
