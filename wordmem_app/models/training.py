from __future__ import annotations

from sqlalchemy.types import JSON

from ..core.extensions import db
from ..utils.time_utils import isoformat, utcnow


class TrainingSession(db.Model):
    """One practice run over an ordered list of words."""
    __tablename__ = 'training_sessions'

    STATUS_ACTIVE = 'active'
    STATUS_PAUSED = 'paused'
    STATUS_COMPLETED = 'completed'
    STATUSES = (STATUS_ACTIVE, STATUS_PAUSED, STATUS_COMPLETED)

    # completed is terminal; same-status updates are handled as no-ops
    TRANSITIONS = {
        STATUS_ACTIVE: {STATUS_PAUSED, STATUS_COMPLETED},
        STATUS_PAUSED: {STATUS_ACTIVE},
        STATUS_COMPLETED: set(),
    }

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    session_name = db.Column(db.String(255), nullable=False)
    settings = db.Column(JSON, nullable=False, default=dict)
    status = db.Column(db.Enum(*STATUSES, name='training_status'), nullable=False, default=STATUS_ACTIVE)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    session_words = db.relationship(
        'SessionWord',
        backref='session',
        order_by='SessionWord.position',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )
    stats = db.relationship(
        'TrainingStats', backref='session', uselist=False, cascade='all, delete-orphan', passive_deletes=True
    )
    errors = db.relationship(
        'WordError', backref='session', lazy='dynamic', cascade='all, delete-orphan', passive_deletes=True
    )
    rounds = db.relationship(
        'ErrorTrainingRound', backref='session', lazy='dynamic', cascade='all, delete-orphan', passive_deletes=True
    )

    @property
    def word_ids(self) -> list[int]:
        return [link.word_id for link in self.session_words]

    def can_transition_to(self, status: str) -> bool:
        return status == self.status or status in self.TRANSITIONS.get(self.status, set())

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'session_name': self.session_name,
            'word_ids': self.word_ids,
            'settings': self.settings or {},
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'completed_at': isoformat(self.completed_at),
        }


class SessionWord(db.Model):
    """Ordered association between a training session and its words."""
    __tablename__ = 'training_session_words'

    session_id = db.Column(
        db.Integer, db.ForeignKey('training_sessions.id', ondelete='CASCADE'), primary_key=True
    )
    word_id = db.Column(db.Integer, db.ForeignKey('words.id', ondelete='CASCADE'), primary_key=True, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)

    word = db.relationship('Word')


class TrainingStats(db.Model):
    """Aggregates computed once when a session's results are recorded."""
    __tablename__ = 'training_stats'

    id = db.Column(db.Integer, primary_key=True)
    # One row per completed session
    session_id = db.Column(
        db.Integer, db.ForeignKey('training_sessions.id', ondelete='CASCADE'), nullable=False, unique=True
    )
    total_words = db.Column(db.Integer, nullable=False)
    correct_words = db.Column(db.Integer, nullable=False)
    error_words = db.Column(db.Integer, nullable=False)
    accuracy_rate = db.Column(db.Float, nullable=False)
    total_time_seconds = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            'total_words': self.total_words,
            'correct_words': self.correct_words,
            'error_words': self.error_words,
            'accuracy_rate': self.accuracy_rate,
            'total_time_seconds': self.total_time_seconds,
        }
