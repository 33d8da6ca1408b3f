"""
Error Service - queries over a user's recorded word errors.

"Error count" is the number of occurrences, i.e. the sum of the
``error_count`` counters. An error falls inside a trailing window when its
most recent occurrence does.
"""
from typing import Any, Dict, List, Optional

from flask import current_app

from wordmem_app.core.error_handlers import NotFoundError, ValidationError
from wordmem_app.models import TrainingSession, WordError, db
from wordmem_app.utils.db_session import safe_commit
from wordmem_app.utils.time_utils import ensure_utc, isoformat, window_start


def user_errors_query(user_id: int):
    return WordError.query.join(TrainingSession, WordError.session_id == TrainingSession.id).filter(
        TrainingSession.user_id == user_id
    )


class ErrorService:

    @staticmethod
    def list_errors(
        user_id: int,
        session_id: Optional[int] = None,
        word_id: Optional[int] = None,
        error_type: Optional[str] = None,
        limit: int = 100,
    ) -> List[WordError]:
        query = user_errors_query(user_id)
        if session_id is not None:
            query = query.filter(WordError.session_id == session_id)
        if word_id is not None:
            query = query.filter(WordError.word_id == word_id)
        if error_type:
            if error_type not in WordError.TYPES:
                raise ValidationError('Invalid errorType', errors={'errorType': error_type})
            query = query.filter(WordError.error_type == error_type)
        return query.order_by(WordError.updated_at.desc(), WordError.id.desc()).limit(limit).all()

    @staticmethod
    def error_stats(user_id: int, days: int, session_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """Per error kind: occurrences, distinct words and sessions in the window."""
        query = user_errors_query(user_id).filter(WordError.updated_at >= window_start(days))
        if session_id is not None:
            query = query.filter(WordError.session_id == session_id)

        buckets: Dict[str, Dict[str, Any]] = {}
        for error in query.all():
            bucket = buckets.setdefault(error.error_type, {'count': 0, 'words': set(), 'sessions': set()})
            bucket['count'] += error.error_count or 0
            bucket['words'].add(error.word_id)
            bucket['sessions'].add(error.session_id)

        stats = [
            {
                'error_type': error_type,
                'error_count': bucket['count'],
                'unique_words': len(bucket['words']),
                'sessions_affected': len(bucket['sessions']),
            }
            for error_type, bucket in buckets.items()
        ]
        stats.sort(key=lambda row: (-row['error_count'], row['error_type']))
        return stats

    @staticmethod
    def top_errors(user_id: int, limit: int, days: int) -> List[Dict[str, Any]]:
        """Most-missed words in the window, ties broken by the latest error."""
        errors = user_errors_query(user_id).filter(WordError.updated_at >= window_start(days)).all()

        per_word: Dict[int, Dict[str, Any]] = {}
        for error in errors:
            entry = per_word.setdefault(error.word_id, {
                'word_id': error.word_id,
                'word': error.word.word if error.word else None,
                'error_count': 0,
                'last_error': None,
                'error_types': set(),
            })
            entry['error_count'] += error.error_count or 0
            entry['error_types'].add(error.error_type)
            last = ensure_utc(error.updated_at)
            if entry['last_error'] is None or last > entry['last_error']:
                entry['last_error'] = last

        ranked = sorted(
            per_word.values(),
            key=lambda entry: (-entry['error_count'], -entry['last_error'].timestamp()),
        )[:limit]
        for entry in ranked:
            entry['last_error'] = isoformat(entry['last_error'])
            entry['error_types'] = sorted(entry['error_types'])
        return ranked

    @staticmethod
    def delete_error(user_id: int, error_id: int) -> None:
        error = user_errors_query(user_id).filter(WordError.id == error_id).first()
        if error is None:
            raise NotFoundError('Error record not found', resource='word_error')
        db.session.delete(error)
        safe_commit(db.session)
        current_app.logger.info(f"Deleted error record {error_id}")
