from __future__ import annotations

from ..core.extensions import db
from ..utils.time_utils import isoformat, utcnow


class Wordbook(db.Model):
    """A named collection of words, system-provided or uploaded by a user."""
    __tablename__ = 'wordbooks'

    KIND_SYSTEM = 'system'
    KIND_USER_UPLOAD = 'user_upload'
    KINDS = (KIND_SYSTEM, KIND_USER_UPLOAD)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default='')
    kind = db.Column(db.Enum(*KINDS, name='wordbook_kind'), nullable=False, default=KIND_USER_UPLOAD, index=True)
    source = db.Column(db.String(255))
    # Denormalized; refreshed by refresh_word_count() after every insert/delete
    total_words = db.Column(db.Integer, nullable=False, default=0)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    words = db.relationship(
        'Word', backref='wordbook', lazy='dynamic', cascade='all, delete-orphan', passive_deletes=True
    )

    @property
    def is_system(self) -> bool:
        return self.kind == self.KIND_SYSTEM

    def is_visible_to(self, user_id: int) -> bool:
        return self.is_system or self.created_by == user_id

    def refresh_word_count(self) -> int:
        self.total_words = Word.query.filter_by(wordbook_id=self.id).count()
        return self.total_words

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description or '',
            'type': self.kind,
            'source': self.source,
            'total_words': self.total_words or 0,
            'created_by': self.created_by,
            'created_by_username': self.owner.username if self.owner else None,
            'created_at': isoformat(self.created_at),
        }


class Word(db.Model):
    """A vocabulary entry; the (word, wordbook) pair is unique."""
    __tablename__ = 'words'
    __table_args__ = (
        db.UniqueConstraint('word', 'wordbook_id', name='uq_word_wordbook'),
    )

    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(255), nullable=False)
    pronunciation_us = db.Column(db.String(255))
    pronunciation_uk = db.Column(db.String(255))
    audio_url_us = db.Column(db.String(500))
    audio_url_uk = db.Column(db.String(500))
    definition = db.Column(db.Text)
    example_sentence = db.Column(db.Text)
    wordbook_id = db.Column(db.Integer, db.ForeignKey('wordbooks.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'word': self.word,
            'pronunciation_us': self.pronunciation_us,
            'pronunciation_uk': self.pronunciation_uk,
            'audio_url_us': self.audio_url_us,
            'audio_url_uk': self.audio_url_uk,
            'definition': self.definition,
            'example_sentence': self.example_sentence,
            'wordbook_id': self.wordbook_id,
            'created_at': isoformat(self.created_at),
        }
