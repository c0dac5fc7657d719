"""Transaction coordination for ledger reads and writes."""
from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class TransactionError(RuntimeError):
    """Base class for transaction coordination failures."""


class TransactionStateError(TransactionError):
    """Raised when begin/commit is called in the wrong state."""


class TransactionConflictError(TransactionError):
    """Raised when the store could not serialize a unit of work. Safe to retry."""


class TransactionState(str, enum.Enum):
    IDLE = "idle"
    OPEN = "open"


class TransactionCoordinator:
    """Runs one serializable unit of work at a time for a logical session.

    The session factory is expected to come from
    :func:`~flight_reservations.database.create_session_factory`, whose engines
    either lock up front (SQLite) or run at ``SERIALIZABLE`` isolation. A
    coordinator is not thread safe; give each worker its own.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory
        self._session: Optional[Session] = None

    @property
    def state(self) -> TransactionState:
        return TransactionState.IDLE if self._session is None else TransactionState.OPEN

    @property
    def session(self) -> Session:
        if self._session is None:
            raise TransactionStateError("no transaction is open")
        return self._session

    def begin(self) -> Session:
        if self._session is not None:
            raise TransactionStateError("a transaction is already open; nesting is not supported")
        session = self._session_factory()
        try:
            # Procure the connection now so lock waits happen here, not mid-unit.
            session.connection()
        except OperationalError as exc:
            session.close()
            logger.warning("could not open transaction: %s", exc)
            raise TransactionConflictError("could not open transaction") from exc
        self._session = session
        logger.debug("transaction opened")
        return session

    def commit(self) -> None:
        session = self.session
        try:
            session.commit()
        except OperationalError as exc:
            session.rollback()
            logger.warning("commit conflict, unit discarded: %s", exc)
            raise TransactionConflictError("transaction could not be committed") from exc
        finally:
            self._close()
        logger.debug("transaction committed")

    def abort(self) -> None:
        if self._session is None:
            return
        try:
            self._session.rollback()
        finally:
            self._close()
        logger.debug("transaction aborted")

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Begin a unit, commit it on exit unless the body already aborted it."""

        session = self.begin()
        try:
            yield session
        except OperationalError as exc:
            self.abort()
            logger.warning("conflict inside transaction: %s", exc)
            raise TransactionConflictError("transaction conflict") from exc
        except BaseException:
            self.abort()
            raise
        if self._session is session:
            self.commit()

    def _close(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.close()
