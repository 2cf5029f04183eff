# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from user_service.shared.config import load_config
from user_service.shared.config.settings import DatabaseConfig
from user_service.shared.logging import logger


class Base(DeclarativeBase):
    pass


def engine_options(database: DatabaseConfig) -> dict[str, Any]:
    """Keyword arguments for ``create_engine`` suited to the configured backend."""

    url = make_url(database.url)
    if url.get_backend_name() != "sqlite":
        return {
            "pool_pre_ping": True,
            "pool_size": database.pool_size,
            "max_overflow": database.max_overflow,
            "pool_timeout": database.pool_timeout,
        }

    # Flask serves requests from several threads; SQLite must allow that.
    options: dict[str, Any] = {
        "connect_args": {"check_same_thread": False, "timeout": database.pool_timeout},
    }
    if url.database in (None, "", ":memory:"):
        # An in-memory database lives only as long as its single connection.
        options["poolclass"] = StaticPool
    return options


def make_engine(database: DatabaseConfig) -> Engine:
    engine = create_engine(database.url, **engine_options(database))
    logger.debug(f"db: engine ready backend={engine.url.get_backend_name()}")
    return engine


ENGINE: Engine = make_engine(load_config().database)

SessionLocal = scoped_session(sessionmaker(bind=ENGINE, expire_on_commit=False))


def init_db(engine: Engine = ENGINE) -> None:
    from user_service.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"db: schema ensured ({', '.join(sorted(Base.metadata.tables))})")
