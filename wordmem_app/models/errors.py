from __future__ import annotations

from ..core.extensions import db
from ..utils.time_utils import isoformat, utcnow


class WordError(db.Model):
    """Error counter for one (word, session, error kind)."""
    __tablename__ = 'word_errors'
    __table_args__ = (
        db.UniqueConstraint('word_id', 'session_id', 'error_type', name='uq_word_session_error_type'),
    )

    TYPE_SPELLING = 'spelling'
    TYPE_PRONUNCIATION = 'pronunciation'
    TYPE_RECOGNITION = 'recognition'
    TYPES = (TYPE_SPELLING, TYPE_PRONUNCIATION, TYPE_RECOGNITION)

    id = db.Column(db.Integer, primary_key=True)
    word_id = db.Column(db.Integer, db.ForeignKey('words.id', ondelete='CASCADE'), nullable=False, index=True)
    session_id = db.Column(
        db.Integer, db.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False, index=True
    )
    error_type = db.Column(db.Enum(*TYPES, name='word_error_type'), nullable=False)
    user_input = db.Column(db.Text)
    correct_answer = db.Column(db.String(255), nullable=False, default='')
    error_count = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    # Time of the most recent occurrence
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    word = db.relationship('Word')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'word_id': self.word_id,
            'word': self.word.word if self.word else None,
            'session_id': self.session_id,
            'session_name': self.session.session_name if self.session else None,
            'error_type': self.error_type,
            'user_input': self.user_input,
            'correct_answer': self.correct_answer,
            'error_count': self.error_count,
            'created_at': isoformat(self.created_at),
            'last_error': isoformat(self.updated_at),
        }


class ErrorTrainingRound(db.Model):
    """A remedial round built from a session's errors."""
    __tablename__ = 'error_training_rounds'
    __table_args__ = (
        db.Index('idx_session_round', 'session_id', 'round_number'),
    )

    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'
    STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED)

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(
        db.Integer, db.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False
    )
    round_number = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.Enum(*STATUSES, name='error_round_status'), nullable=False, default=STATUS_ACTIVE)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    round_words = db.relationship(
        'ErrorRoundWord',
        backref='round',
        order_by='ErrorRoundWord.position',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    @property
    def word_ids(self) -> list[int]:
        return [link.word_id for link in self.round_words]

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'session_id': self.session_id,
            'session_name': self.session.session_name if self.session else None,
            'round_number': self.round_number,
            'word_ids': self.word_ids,
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'completed_at': isoformat(self.completed_at),
        }


class ErrorRoundWord(db.Model):
    """Ordered association between an error round and its words."""
    __tablename__ = 'error_round_words'

    round_id = db.Column(
        db.Integer, db.ForeignKey('error_training_rounds.id', ondelete='CASCADE'), primary_key=True
    )
    word_id = db.Column(db.Integer, db.ForeignKey('words.id', ondelete='CASCADE'), primary_key=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    word = db.relationship('Word')
