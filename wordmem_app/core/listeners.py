"""
Activity Listener
Subscribes to the application signals and writes an audit line per event.
"""
from flask import current_app

from .signals import error_round_created, session_completed, user_registered, words_imported


def init_activity_listener():
    """Register signal subscriptions (idempotent)."""
    user_registered.connect(on_user_registered)
    session_completed.connect(on_session_completed)
    error_round_created.connect(on_error_round_created)
    words_imported.connect(on_words_imported)


def on_user_registered(sender, **kwargs):
    user = kwargs.get('user')
    if user is None:
        return
    current_app.logger.info(f"[activity] user registered: {user.username} ({user.id})")


def on_session_completed(sender, **kwargs):
    current_app.logger.info(
        "[activity] session %s completed by user %s: %s/%s correct (%.2f%%) in %ss",
        kwargs.get('session_id'),
        kwargs.get('user_id'),
        kwargs.get('correct_words', 0),
        kwargs.get('total_words', 0),
        kwargs.get('accuracy_rate', 0.0),
        kwargs.get('total_time_seconds', 0),
    )


def on_error_round_created(sender, **kwargs):
    current_app.logger.info(
        "[activity] error round %s created for session %s with %d words",
        kwargs.get('round_id'),
        kwargs.get('session_id'),
        len(kwargs.get('word_ids') or []),
    )


def on_words_imported(sender, **kwargs):
    current_app.logger.info(
        "[activity] %s import into wordbook %s: %s inserted, %s skipped",
        kwargs.get('source', 'unknown'),
        kwargs.get('wordbook_id'),
        kwargs.get('inserted', 0),
        kwargs.get('skipped', 0),
    )
