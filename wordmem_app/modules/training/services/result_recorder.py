"""
Result Recorder - persists a finished session's per-word outcomes.

Everything (error counters, the stats row, the status change) is written in
one transaction: either all of it is visible afterwards or none of it is.
"""
from typing import Any, Dict, List

from flask import current_app

from wordmem_app.core.error_handlers import ConflictError, NotFoundError, ValidationError
from wordmem_app.core.signals import session_completed
from wordmem_app.models import TrainingSession, TrainingStats, Word, WordError, db
from wordmem_app.utils.db_session import transaction
from wordmem_app.utils.time_utils import utcnow
from ..logics.session_stats import summarize_results


class ResultRecorder:

    @staticmethod
    def _upsert_error(session_id: int, word: Word, item) -> WordError:
        error = WordError.query.filter_by(
            word_id=word.id, session_id=session_id, error_type=item.error_type
        ).first()
        if error is None:
            error = WordError(
                word_id=word.id,
                session_id=session_id,
                error_type=item.error_type,
                user_input=item.user_input or '',
                correct_answer=word.word,
                error_count=1,
            )
            db.session.add(error)
        else:
            error.error_count = (error.error_count or 0) + 1
            error.user_input = item.user_input or ''
            error.updated_at = utcnow()
        # Make the row visible to the next lookup in this batch
        db.session.flush()
        return error

    @staticmethod
    def record(session_id: int, user_id: int, results: List[Any]) -> Dict[str, Any]:
        """
        Record ``results`` for a session and mark it completed.

        Raises:
            NotFoundError: session missing or not owned by ``user_id``.
            ConflictError: session already completed.
            ValidationError: a result references a word outside the session.
        """
        with transaction(db.session):
            session = (
                TrainingSession.query.filter_by(id=session_id, user_id=user_id)
                .with_for_update()
                .first()
            )
            if session is None:
                raise NotFoundError('Training session not found', resource='training_session')
            if session.status == TrainingSession.STATUS_COMPLETED:
                raise ConflictError('Results already recorded for this session')

            session_word_ids = set(session.word_ids)
            foreign = sorted({item.word_id for item in results if item.word_id not in session_word_ids})
            if foreign:
                raise ValidationError('Results reference words outside this session', errors={'wordId': foreign})

            words = {
                word.id: word for word in Word.query.filter(Word.id.in_(session_word_ids)).all()
            } if session_word_ids else {}

            for item in results:
                if not item.is_correct:
                    ResultRecorder._upsert_error(session.id, words[item.word_id], item)

            stats = summarize_results(results)
            db.session.add(TrainingStats(session_id=session.id, **stats))

            session.status = TrainingSession.STATUS_COMPLETED
            session.completed_at = utcnow()

        current_app.logger.info(
            f"Recorded {stats['total_words']} results for session {session_id} "
            f"({stats['accuracy_rate']}% correct)"
        )
        session_completed.send(
            current_app._get_current_object(), user_id=user_id, session_id=session_id, **stats
        )
        return stats
