# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session

from tasktracker.shared.errors.base import StoreUnavailableError
from tasktracker.shared.logging import logger


def _is_connectivity_failure(exc: BaseException) -> bool:
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


@dataclass(slots=True)
class SqlAlchemyUnitOfWork:
    """One session, one transaction: commit on clean exit, roll back otherwise."""

    session_factory: Callable[[], Session]
    _session: Session | None = field(default=None, init=False)

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("unit of work is not active")
        return self._session

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        session = self.session
        try:
            if exc is None:
                session.commit()
            else:
                logger.debug(f"uow: rollback after {exc_type.__name__}")
                session.rollback()
        finally:
            session.close()
            self._session = None


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    """Yield a transactional session.

    Lost or refused connections surface as :class:`StoreUnavailableError`;
    constraint violations and other driver errors propagate unchanged so
    repositories can map them.
    """
    try:
        with SqlAlchemyUnitOfWork(factory) as uow:
            yield uow.session
    except DBAPIError as exc:
        if not _is_connectivity_failure(exc):
            raise
        logger.error(f"uow: store unavailable ({type(exc.orig).__name__})")
        raise StoreUnavailableError() from exc
