"""
Session Service - training session lifecycle.

Sessions belong to one user; every lookup is scoped by ``user_id`` and a
session owned by someone else is reported as missing.
"""
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from wordmem_app.core.error_handlers import ConflictError, NotFoundError, ValidationError
from wordmem_app.models import SessionWord, TrainingSession, WordError, db
from wordmem_app.modules.words.services.word_service import WordService
from wordmem_app.utils.db_session import safe_commit
from wordmem_app.utils.time_utils import parse_client_datetime, utcnow
from ..logics.session_stats import normalize_settings


class SessionService:
    """Service layer for training sessions."""

    @staticmethod
    def get_owned(session_id: int, user_id: int) -> TrainingSession:
        session = TrainingSession.query.filter_by(id=session_id, user_id=user_id).first()
        if session is None:
            raise NotFoundError('Training session not found', resource='training_session')
        return session

    @staticmethod
    def create_session(
        user_id: int, session_name: str, word_ids: List[int], settings: Optional[Dict[str, Any]] = None
    ) -> TrainingSession:
        """Create an active session over ``word_ids`` (order kept, duplicates dropped)."""
        ordered_ids = list(dict.fromkeys(word_ids))
        if not ordered_ids:
            raise ValidationError('Session name and word IDs are required')

        visible = WordService.visible_word_ids(user_id, ordered_ids)
        missing = [word_id for word_id in ordered_ids if word_id not in visible]
        if missing:
            raise ValidationError('Unknown word IDs', errors={'wordIds': missing})

        try:
            normalized = normalize_settings(settings)
        except ValueError as exc:
            raise ValidationError(str(exc), errors={'settings': str(exc)})

        session = TrainingSession(
            user_id=user_id,
            session_name=session_name,
            settings=normalized,
            status=TrainingSession.STATUS_ACTIVE,
        )
        session.session_words = [
            SessionWord(word_id=word_id, position=position) for position, word_id in enumerate(ordered_ids)
        ]
        db.session.add(session)
        safe_commit(db.session)
        current_app.logger.info(
            f"User {user_id} created training session {session.id} with {len(ordered_ids)} words"
        )
        return session

    @staticmethod
    def list_sessions(user_id: int) -> List[Dict[str, Any]]:
        """Caller's sessions, newest first, with error and word counts."""
        error_counts = (
            db.session.query(
                WordError.session_id.label('session_id'),
                func.coalesce(func.sum(WordError.error_count), 0).label('error_count'),
            )
            .group_by(WordError.session_id)
            .subquery()
        )
        word_counts = (
            db.session.query(
                SessionWord.session_id.label('session_id'),
                func.count(SessionWord.word_id).label('word_count'),
            )
            .group_by(SessionWord.session_id)
            .subquery()
        )
        rows = (
            db.session.query(
                TrainingSession,
                func.coalesce(error_counts.c.error_count, 0),
                func.coalesce(word_counts.c.word_count, 0),
            )
            .outerjoin(error_counts, error_counts.c.session_id == TrainingSession.id)
            .outerjoin(word_counts, word_counts.c.session_id == TrainingSession.id)
            .filter(TrainingSession.user_id == user_id)
            .order_by(TrainingSession.created_at.desc(), TrainingSession.id.desc())
            .all()
        )

        sessions = []
        for session, error_count, word_count in rows:
            data = session.to_dict()
            data['error_count'] = int(error_count or 0)
            data['word_count'] = int(word_count or 0)
            sessions.append(data)
        return sessions

    @staticmethod
    def session_detail(session: TrainingSession) -> Dict[str, Any]:
        data = session.to_dict()
        data['words'] = [link.word.to_dict() for link in session.session_words if link.word is not None]
        data['stats'] = session.stats.to_dict() if session.stats else None
        return data

    @staticmethod
    def update_status(session: TrainingSession, status: str, completed_at_raw=None) -> TrainingSession:
        """
        Apply a status transition.

        Raises:
            ValidationError: unknown status.
            ConflictError: transition not allowed from the current status.
        """
        if status not in TrainingSession.STATUSES:
            raise ValidationError('Invalid status', errors={'status': status})
        if status == session.status:
            return session
        if not session.can_transition_to(status):
            current_app.logger.warning(
                f"Rejected status change {session.status} -> {status} for session {session.id}"
            )
            raise ConflictError(
                f"Cannot change session status from '{session.status}' to '{status}'",
                details={'current_status': session.status},
            )

        session.status = status
        if status == TrainingSession.STATUS_COMPLETED:
            session.completed_at = parse_client_datetime(completed_at_raw) or utcnow()
        safe_commit(db.session)
        current_app.logger.info(f"Training session {session.id} is now {status}")
        return session

    @staticmethod
    def delete_session(session: TrainingSession) -> None:
        session_id = session.id
        db.session.delete(session)
        safe_commit(db.session)
        current_app.logger.info(f"Deleted training session {session_id}")
