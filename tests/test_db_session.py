"""Commit retries when SQLite reports a lock."""
import sqlite3

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from wordmem_app import db
from wordmem_app.models import Wordbook
from wordmem_app.utils.db_session import safe_commit


class FailingStatements:
    """Raise ``error`` for the first ``times`` statements starting with ``prefix``."""

    def __init__(self, prefix, times=1, error='database is locked', skip=0):
        self.prefix = prefix
        self.times = times
        self.error = error
        self.skip = skip
        self.seen = 0
        self.raised = 0

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if not statement.startswith(self.prefix):
            return
        self.seen += 1
        if self.seen > self.skip and self.raised < self.times:
            self.raised += 1
            raise sqlite3.OperationalError(self.error)


@pytest.fixture
def failing_statements(app):
    listeners = []

    def _install(prefix, **kwargs):
        listener = FailingStatements(prefix, **kwargs)
        event.listen(db.engine, 'before_cursor_execute', listener)
        listeners.append(listener)
        return listener

    yield _install

    with app.app_context():
        for listener in listeners:
            event.remove(db.engine, 'before_cursor_execute', listener)


def test_lock_during_insert_is_retried(app, failing_statements):
    with app.app_context():
        failing = failing_statements('INSERT INTO wordbooks')
        db.session.add(Wordbook(name='Retried'))

        safe_commit(db.session, initial_delay=0)

        assert failing.raised == 1
        db.session.expire_all()
        assert Wordbook.query.filter_by(name='Retried').count() == 1


def test_lock_during_update_replays_changes(app, failing_statements):
    with app.app_context():
        wordbook = Wordbook(name='Before')
        db.session.add(wordbook)
        db.session.commit()
        wordbook_id = wordbook.id

        failing = failing_statements('UPDATE wordbooks')
        wordbook.name = 'After'
        wordbook.total_words = 7
        safe_commit(db.session, initial_delay=0)

        assert failing.raised == 1
        db.session.expire_all()
        stored = db.session.get(Wordbook, wordbook_id)
        assert stored.name == 'After'
        assert stored.total_words == 7


def test_lock_during_delete_is_retried(app, failing_statements):
    with app.app_context():
        wordbook = Wordbook(name='Gone')
        db.session.add(wordbook)
        db.session.commit()

        failing = failing_statements('DELETE FROM wordbooks')
        db.session.delete(wordbook)
        safe_commit(db.session, initial_delay=0)

        assert failing.raised == 1
        assert Wordbook.query.count() == 0


def test_persistent_lock_is_raised_after_retries(app, failing_statements):
    with app.app_context():
        failing = failing_statements('INSERT INTO wordbooks', times=10)
        db.session.add(Wordbook(name='Never'))

        with pytest.raises(OperationalError):
            safe_commit(db.session, retries=3, initial_delay=0)

        assert failing.raised == 3
        assert Wordbook.query.count() == 0


def test_other_operational_errors_are_not_retried(app, failing_statements):
    with app.app_context():
        failing = failing_statements('INSERT INTO wordbooks', error='disk I/O error')
        db.session.add(Wordbook(name='Broken'))

        with pytest.raises(OperationalError):
            safe_commit(db.session, initial_delay=0)

        assert failing.raised == 1
        assert Wordbook.query.count() == 0


def test_lock_after_earlier_flush_is_raised(app, failing_statements):
    with app.app_context():
        failing = failing_statements('INSERT INTO wordbooks', skip=1)
        db.session.add(Wordbook(name='Flushed'))
        db.session.flush()
        db.session.add(Wordbook(name='Pending'))

        with pytest.raises(OperationalError):
            safe_commit(db.session, initial_delay=0)

        assert failing.raised == 1
        assert Wordbook.query.count() == 0
