"""
Analytics Service - read-only learning analysis for one user.

Rows are loaded with plain ORM queries and aggregated by the pure helpers
in ``logics.aggregation``, so the same code runs on SQLite and MySQL.
A session is in a window when it was created inside it; an error counter is
in a window when its latest occurrence is.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from wordmem_app.models import SessionWord, TrainingSession, Word, WordError, db
from wordmem_app.modules.errors.services.error_service import user_errors_query
from wordmem_app.modules.training.services.session_service import SessionService
from wordmem_app.modules.words.services.word_service import WordService
from wordmem_app.utils.time_utils import ensure_utc, isoformat, utcnow, window_start
from ..logics.aggregation import (
    SessionFacts,
    classify_mastery,
    distribution,
    mastery_summary,
    mean,
    percentage,
    rank_practice_recommendations,
    rollup_sessions,
)

RECOMMENDATION_WINDOW_DAYS = 30
TOP_ERROR_WORDS = 10


def _period(days: int) -> str:
    return f'{days} days'


class AnalyticsService:

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @staticmethod
    def _window_sessions(user_id: int, start: datetime) -> List[TrainingSession]:
        return (
            TrainingSession.query.filter(
                TrainingSession.user_id == user_id,
                TrainingSession.created_at >= start,
            )
            .order_by(TrainingSession.created_at, TrainingSession.id)
            .all()
        )

    @staticmethod
    def _session_facts(sessions: List[TrainingSession]) -> List[SessionFacts]:
        if not sessions:
            return []
        session_ids = [session.id for session in sessions]
        error_totals = dict(
            db.session.query(WordError.session_id, func.sum(WordError.error_count))
            .filter(WordError.session_id.in_(session_ids))
            .group_by(WordError.session_id)
            .all()
        )
        word_ids: Dict[int, List[int]] = {}
        for link in SessionWord.query.filter(SessionWord.session_id.in_(session_ids)).all():
            word_ids.setdefault(link.session_id, []).append(link.word_id)

        return [
            SessionFacts(
                session_id=session.id,
                created_at=ensure_utc(session.created_at),
                word_ids=word_ids.get(session.id, []),
                error_total=int(error_totals.get(session.id) or 0),
                accuracy_rate=session.stats.accuracy_rate if session.stats else None,
                total_time_seconds=session.stats.total_time_seconds if session.stats else 0,
            )
            for session in sessions
        ]

    @staticmethod
    def _window_errors(user_id: int, start: datetime) -> List[WordError]:
        return user_errors_query(user_id).filter(WordError.updated_at >= start).all()

    @staticmethod
    def _per_word_errors(errors: List[WordError]) -> Dict[int, Dict[str, Any]]:
        per_word: Dict[int, Dict[str, Any]] = {}
        for error in errors:
            first = ensure_utc(error.created_at)
            last = ensure_utc(error.updated_at) or first
            entry = per_word.setdefault(error.word_id, {
                'word_id': error.word_id,
                'word': error.word.word if error.word else None,
                'error_count': 0,
                'first_error': first,
                'last_error': last,
            })
            entry['error_count'] += error.error_count or 0
            entry['first_error'] = min(entry['first_error'], first)
            entry['last_error'] = max(entry['last_error'], last)
        return per_word

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    @staticmethod
    def overview(user_id: int, days: int) -> Dict[str, Any]:
        start = window_start(days)
        facts = AnalyticsService._session_facts(AnalyticsService._window_sessions(user_id, start))
        errors = AnalyticsService._window_errors(user_id, start)
        total_errors = sum(error.error_count or 0 for error in errors)

        type_counts: Dict[str, int] = {}
        for error in errors:
            type_counts[error.error_type] = type_counts.get(error.error_type, 0) + (error.error_count or 0)

        per_word = AnalyticsService._per_word_errors(errors)
        top_words = sorted(
            per_word.values(), key=lambda entry: (-entry['error_count'], -entry['last_error'].timestamp())
        )[:TOP_ERROR_WORDS]

        touched_words = set()
        for item in facts:
            touched_words.update(item.word_ids)

        return {
            'basic_stats': {
                'total_sessions': len(facts),
                'total_words': len(touched_words),
                'total_errors': total_errors,
                'avg_accuracy': mean(item.accuracy_rate for item in facts),
                'total_time_seconds': sum(item.total_time_seconds or 0 for item in facts),
            },
            'error_types': distribution(type_counts, 'error_type'),
            'daily_progress': rollup_sessions(facts, 'day'),
            'top_error_words': [
                {
                    'word_id': entry['word_id'],
                    'word': entry['word'],
                    'error_count': entry['error_count'],
                    'last_error': isoformat(entry['last_error']),
                    'error_percentage': percentage(entry['error_count'], total_errors),
                }
                for entry in top_words
            ],
            'weekly_trend': rollup_sessions(facts, 'week'),
            'period': _period(days),
        }

    @staticmethod
    def session_analysis(user_id: int, session_id: int) -> Dict[str, Any]:
        session = SessionService.get_owned(session_id, user_id)
        errors = (
            WordError.query.filter_by(session_id=session.id)
            .order_by(WordError.updated_at.desc(), WordError.id.desc())
            .all()
        )
        total_errors = sum(error.error_count or 0 for error in errors)

        type_counts: Dict[str, int] = {}
        for error in errors:
            type_counts[error.error_type] = type_counts.get(error.error_type, 0) + (error.error_count or 0)

        per_word = AnalyticsService._per_word_errors(errors)
        difficulty = sorted(
            per_word.values(), key=lambda entry: (-entry['error_count'], entry['word_id'])
        )

        session_data = session.to_dict()
        session_data['stats'] = session.stats.to_dict() if session.stats else None
        return {
            'session': session_data,
            'errors': [error.to_dict() for error in errors],
            'error_type_stats': distribution(type_counts, 'error_type'),
            'word_difficulty': [
                {
                    'word_id': entry['word_id'],
                    'word': entry['word'],
                    'error_count': entry['error_count'],
                    'last_error': isoformat(entry['last_error']),
                    'difficulty_percentage': percentage(entry['error_count'], total_errors),
                }
                for entry in difficulty
            ],
        }

    @staticmethod
    def progress(user_id: int, days: int, group_by: str) -> Dict[str, Any]:
        facts = AnalyticsService._session_facts(AnalyticsService._window_sessions(user_id, window_start(days)))
        return {
            'progress': rollup_sessions(facts, group_by),
            'group_by': group_by,
            'period': _period(days),
        }

    @staticmethod
    def word_mastery(user_id: int, days: int, limit: int) -> Dict[str, Any]:
        """Tier every word practiced in the window by its in-window error count."""
        start = window_start(days)
        sessions = AnalyticsService._window_sessions(user_id, start)
        facts = AnalyticsService._session_facts(sessions)

        practice_sessions: Dict[int, set] = {}
        for item in facts:
            for word_id in item.word_ids:
                practice_sessions.setdefault(word_id, set()).add(item.session_id)
        if not practice_sessions:
            return {'word_mastery': [], 'mastery_stats': mastery_summary([]), 'period': _period(days)}

        per_word = AnalyticsService._per_word_errors(AnalyticsService._window_errors(user_id, start))
        words = {word.id: word for word in Word.query.filter(Word.id.in_(practice_sessions)).all()}

        rows = []
        for word_id, session_ids in practice_sessions.items():
            errors = per_word.get(word_id)
            total_errors = errors['error_count'] if errors else 0
            rows.append({
                'word_id': word_id,
                'word': words[word_id].word if word_id in words else None,
                'practice_sessions': len(session_ids),
                'total_errors': total_errors,
                'first_error': isoformat(errors['first_error']) if errors else None,
                'last_error': isoformat(errors['last_error']) if errors else None,
                'error_rate': percentage(total_errors, len(session_ids)),
                'mastery_level': classify_mastery(total_errors),
            })

        rows.sort(key=lambda row: (row['error_rate'], -row['practice_sessions'], row['word_id']))
        return {
            'word_mastery': rows[:limit],
            'mastery_stats': mastery_summary(row['mastery_level'] for row in rows),
            'period': _period(days),
        }

    @staticmethod
    def recommendations(user_id: int, limit: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Words to review (>= 2 recent errors) and words never practiced yet."""
        now = now or utcnow()
        errors = AnalyticsService._window_errors(user_id, window_start(RECOMMENDATION_WINDOW_DAYS, now))
        practice = rank_practice_recommendations(
            AnalyticsService._per_word_errors(errors).values(), now, limit
        )
        for entry in practice:
            entry['first_error'] = isoformat(entry['first_error'])
            entry['last_error'] = isoformat(entry['last_error'])

        practiced = (
            select(SessionWord.word_id)
            .join(TrainingSession, SessionWord.session_id == TrainingSession.id)
            .where(TrainingSession.user_id == user_id)
        )
        new_words = (
            WordService.visible_words_query(user_id)
            .filter(~Word.id.in_(practiced))
            .order_by(Word.created_at.desc(), Word.id.desc())
            .limit(limit)
            .all()
        )

        return {
            'practice_recommendations': practice,
            'new_words': [
                {'word_id': word.id, 'word': word.word, 'created_at': isoformat(word.created_at)}
                for word in new_words
            ],
            'total_recommendations': len(practice) + len(new_words),
        }
