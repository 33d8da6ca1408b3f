"""Utility helpers for working with the SQLAlchemy session.

SQLite holds a write lock on the database for the duration of a
transaction, which can surface as ``database is locked`` when two requests
write at roughly the same time. :func:`safe_commit` retries the commit with
exponential backoff; :func:`transaction` wraps a multi-statement unit of work
so that it either commits as a whole or is rolled back.

A failed commit must be rolled back before the session is usable again, and
the rollback discards the pending changes. :func:`safe_commit` therefore
snapshots the changes that are still pending in the session before each
attempt and replays them after the rollback. Rows already flushed earlier in
the same transaction cannot be replayed, so a lock error in that case is
re-raised after the rollback.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import event, inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.session import Session

LOCKED_MESSAGES = {"database is locked", "database is busy"}

FLUSHED_KEY = "wordmem_flushed"


@event.listens_for(Session, "after_flush")
def _mark_flushed(session, flush_context):
    session.info[FLUSHED_KEY] = True


@event.listens_for(Session, "after_transaction_end")
def _clear_flushed(session, transaction):
    if transaction.parent is None:
        session.info.pop(FLUSHED_KEY, None)


def _is_lock_error(error: OperationalError) -> bool:
    """Return ``True`` if the OperationalError was caused by a lock."""

    message = str(error).lower()
    return any(token in message for token in LOCKED_MESSAGES)


class PendingChanges:
    """Unflushed adds, column updates and deletes of a session."""

    def __init__(self, new, updates, deleted):
        self.new = new
        self.updates = updates
        self.deleted = deleted

    @classmethod
    def capture(cls, session: Session) -> "PendingChanges":
        updates = []
        for obj in session.dirty:
            state = inspect(obj)
            values = {
                attr.key: state.dict[attr.key]
                for attr in state.mapper.column_attrs
                if attr.key in state.dict and state.attrs[attr.key].history.has_changes()
            }
            if values:
                updates.append((obj, values))
        return cls(list(session.new), updates, list(session.deleted))

    def replay(self, session: Session) -> None:
        for obj in self.new:
            session.add(obj)
        for obj, values in self.updates:
            for key, value in values.items():
                setattr(obj, key, value)
        for obj in self.deleted:
            session.delete(obj)


def safe_commit(
    session: Session,
    retries: int = 5,
    initial_delay: float = 0.1,
) -> None:
    """Commit the current transaction, retrying when SQLite is locked.

    Raises:
        OperationalError: Re-raised if the session cannot be committed after
            the configured number of retries, if the error is unrelated to
            SQLite locking, or if part of the transaction was flushed before
            this call and cannot be replayed.
    """

    delay = initial_delay
    for attempt in range(retries):
        replayable = not session.info.get(FLUSHED_KEY)
        pending = PendingChanges.capture(session)
        try:
            session.commit()
            return
        except OperationalError as exc:
            session.rollback()
            if attempt == retries - 1 or not _is_lock_error(exc) or not replayable:
                raise

            time.sleep(delay)
            delay *= 2
            pending.replay(session)


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """All-or-nothing unit of work on ``session``.

    Commits on normal exit; any exception rolls back every pending change
    and is re-raised unchanged.
    """

    try:
        yield session
        safe_commit(session)
    except Exception:
        session.rollback()
        raise
