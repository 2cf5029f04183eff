# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from user_service.shared.logging import logger


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """One transaction per block: committed on exit, rolled back if the block raises.

    The session is closed afterwards, so rows returned from the block are detached
    and must be mapped to domain objects before leaving it.
    """

    session = factory()
    try:
        with session.begin():
            yield session
    except Exception as exc:
        logger.debug(f"uow: rolled back after {type(exc).__name__}")
        raise
    finally:
        session.close()


__all__ = ["unit_of_work_scope"]
