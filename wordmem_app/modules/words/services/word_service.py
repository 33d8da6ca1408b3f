"""
Word Service - word lookups and single-word changes.

Reads are limited to words in wordbooks visible to the caller; changes to
the creator of the word's wordbook.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app

from wordmem_app.core.error_handlers import NotFoundError, ValidationError
from wordmem_app.models import Word, Wordbook, db
from wordmem_app.modules.wordbooks.services.wordbook_service import (
    WORD_FIELDS,
    WordbookService,
    visible_wordbook_filter,
)
from wordmem_app.utils.db_session import safe_commit


class WordService:
    """Service layer for words."""

    @staticmethod
    def visible_words_query(user_id: int):
        return Word.query.join(Wordbook, Word.wordbook_id == Wordbook.id).filter(visible_wordbook_filter(user_id))

    @staticmethod
    def get_visible_word(word_id: int, user_id: int) -> Word:
        word = WordService.visible_words_query(user_id).filter(Word.id == word_id).first()
        if word is None:
            raise NotFoundError('Word not found', resource='word')
        return word

    @staticmethod
    def get_owned_word(word_id: int, user_id: int) -> Word:
        word = (
            Word.query.join(Wordbook, Word.wordbook_id == Wordbook.id)
            .filter(Word.id == word_id, Wordbook.created_by == user_id)
            .first()
        )
        if word is None:
            raise NotFoundError('Word not found or no permission', resource='word')
        return word

    @staticmethod
    def visible_word_ids(user_id: int, word_ids: Iterable[int]) -> set:
        ids = set(word_ids)
        if not ids:
            return set()
        rows = (
            WordService.visible_words_query(user_id)
            .filter(Word.id.in_(ids))
            .with_entities(Word.id)
            .all()
        )
        return {row.id for row in rows}

    @staticmethod
    def list_words(wordbook: Wordbook) -> List[Word]:
        return Word.query.filter_by(wordbook_id=wordbook.id).order_by(Word.word).all()

    @staticmethod
    def search(user_id: int, query: str, limit: int) -> List[Word]:
        pattern = f"%{query}%"
        return (
            WordService.visible_words_query(user_id)
            .filter(Word.word.like(pattern))
            .order_by(Word.word, Word.id)
            .limit(limit)
            .all()
        )

    @staticmethod
    def create_word(wordbook: Wordbook, text: str, fields: Dict[str, Optional[str]]) -> Tuple[Word, bool]:
        """Create one word (lower-cased); an existing (word, wordbook) pair is returned as-is."""
        text = (text or '').strip().lower()
        if not text:
            raise ValidationError('Word is required')

        existing = Word.query.filter_by(wordbook_id=wordbook.id, word=text).first()
        if existing is not None:
            return existing, False

        entry = {'word': text}
        entry.update({key: value for key, value in fields.items() if key in WORD_FIELDS})
        WordbookService.add_words(wordbook, [entry], source='manual')
        return Word.query.filter_by(wordbook_id=wordbook.id, word=text).first(), True

    @staticmethod
    def delete_word(word: Word) -> None:
        wordbook = word.wordbook
        word_id = word.id
        db.session.delete(word)
        db.session.flush()
        wordbook.refresh_word_count()
        safe_commit(db.session)
        current_app.logger.info(f"Deleted word {word_id} from wordbook {wordbook.id}")
