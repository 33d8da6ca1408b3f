"""
Round Service - remedial error-training rounds.

A round is an ordered word list drawn from one session's errors. Rounds
start active and may only move to completed.
"""
import random
from typing import List, Optional

from flask import current_app

from wordmem_app.core.error_handlers import ConflictError, NotFoundError, ValidationError
from wordmem_app.core.signals import error_round_created
from wordmem_app.models import ErrorRoundWord, ErrorTrainingRound, TrainingSession, WordError, db
from wordmem_app.modules.training.services.session_service import SessionService
from wordmem_app.utils.db_session import safe_commit
from wordmem_app.utils.time_utils import parse_client_datetime, utcnow
from ..logics.round_selection import select_round_words, total_errors_by_word


class RoundService:

    @staticmethod
    def _persist_round(session: TrainingSession, word_ids: List[int], round_number: Optional[int]) -> ErrorTrainingRound:
        training_round = ErrorTrainingRound(
            session_id=session.id,
            round_number=round_number or 1,
            status=ErrorTrainingRound.STATUS_ACTIVE,
        )
        training_round.round_words = [
            ErrorRoundWord(word_id=word_id, position=position) for position, word_id in enumerate(word_ids)
        ]
        db.session.add(training_round)
        safe_commit(db.session)

        current_app.logger.info(
            f"Created error round {training_round.id} (#{training_round.round_number}) "
            f"for session {session.id} with {len(word_ids)} words"
        )
        error_round_created.send(
            current_app._get_current_object(),
            session_id=session.id,
            round_id=training_round.id,
            word_ids=list(word_ids),
        )
        return training_round

    @staticmethod
    def create_round(user_id: int, session_id: int, word_ids: List[int], round_number: Optional[int] = None):
        """Create a round from an explicit word list; every word must be in the session."""
        session = SessionService.get_owned(session_id, user_id)
        ordered_ids = list(dict.fromkeys(word_ids))
        in_session = set(session.word_ids)
        foreign = [word_id for word_id in ordered_ids if word_id not in in_session]
        if foreign:
            raise ValidationError('Words are not part of this session', errors={'wordIds': foreign})
        return RoundService._persist_round(session, ordered_ids, round_number)

    @staticmethod
    def generate_random_round(
        user_id: int,
        session_id: int,
        word_count: Optional[int] = None,
        round_number: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> ErrorTrainingRound:
        """
        Build a round from the session's most-missed words.

        Raises:
            NotFoundError: session missing, or no errors recorded for it.
        """
        session = SessionService.get_owned(session_id, user_id)
        word_count = word_count or current_app.config.get('DEFAULT_ROUND_WORD_COUNT', 10)

        rows = (
            db.session.query(WordError.word_id, WordError.error_count)
            .filter(WordError.session_id == session.id)
            .all()
        )
        word_ids = select_round_words(total_errors_by_word(rows), word_count, rng=rng)
        if not word_ids:
            raise NotFoundError('No error words found for this session', resource='word_error')
        return RoundService._persist_round(session, word_ids, round_number)

    @staticmethod
    def list_rounds(user_id: int, session_id: Optional[int] = None, status: str = 'active'):
        query = ErrorTrainingRound.query.join(
            TrainingSession, ErrorTrainingRound.session_id == TrainingSession.id
        ).filter(TrainingSession.user_id == user_id)
        if session_id is not None:
            query = query.filter(ErrorTrainingRound.session_id == session_id)
        if status != 'all':
            if status not in ErrorTrainingRound.STATUSES:
                raise ValidationError('Invalid status', errors={'status': status})
            query = query.filter(ErrorTrainingRound.status == status)
        return query.order_by(ErrorTrainingRound.created_at.desc(), ErrorTrainingRound.id.desc()).all()

    @staticmethod
    def get_owned_round(user_id: int, round_id: int) -> ErrorTrainingRound:
        training_round = (
            ErrorTrainingRound.query.join(TrainingSession, ErrorTrainingRound.session_id == TrainingSession.id)
            .filter(ErrorTrainingRound.id == round_id, TrainingSession.user_id == user_id)
            .first()
        )
        if training_round is None:
            raise NotFoundError('Error training round not found', resource='error_training_round')
        return training_round

    @staticmethod
    def update_status(training_round: ErrorTrainingRound, status: str, completed_at_raw=None):
        if status not in ErrorTrainingRound.STATUSES:
            raise ValidationError('Invalid status', errors={'status': status})
        if status == training_round.status:
            return training_round
        if training_round.status == ErrorTrainingRound.STATUS_COMPLETED:
            raise ConflictError('Error training round is already completed')

        training_round.status = status
        training_round.completed_at = parse_client_datetime(completed_at_raw) or utcnow()
        safe_commit(db.session)
        current_app.logger.info(f"Error round {training_round.id} completed")
        return training_round
