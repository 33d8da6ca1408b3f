"""
Wordbook Service - visibility, ownership and bulk word import.

A wordbook is visible to a user when it is a system wordbook or was created
by that user; only the creator of a user wordbook may change it.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from flask import current_app
from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError

from wordmem_app.core.error_handlers import NotFoundError, ValidationError
from wordmem_app.core.signals import words_imported
from wordmem_app.models import Word, Wordbook, db
from wordmem_app.utils.db_session import safe_commit
from ..logics.word_table import (
    WordTableError,
    extract_word_rows,
    is_supported_filename,
    read_word_table,
)

WORD_FIELDS = (
    'pronunciation_us',
    'pronunciation_uk',
    'audio_url_us',
    'audio_url_uk',
    'definition',
    'example_sentence',
)

DUPLICATE_MESSAGES = ('unique constraint failed', 'duplicate entry', 'duplicate key')


def visible_wordbook_filter(user_id: int):
    return or_(Wordbook.kind == Wordbook.KIND_SYSTEM, Wordbook.created_by == user_id)


def _is_duplicate_error(error: IntegrityError) -> bool:
    message = str(error.orig if error.orig is not None else error).lower()
    return any(token in message for token in DUPLICATE_MESSAGES)


class WordbookService:
    """Service layer for wordbooks."""

    @staticmethod
    def list_visible(user_id: int) -> List[Wordbook]:
        system_first = case((Wordbook.kind == Wordbook.KIND_SYSTEM, 0), else_=1)
        return (
            Wordbook.query.filter(visible_wordbook_filter(user_id))
            .order_by(system_first, Wordbook.created_at.desc(), Wordbook.id.desc())
            .all()
        )

    @staticmethod
    def get_visible(wordbook_id: int, user_id: int) -> Wordbook:
        wordbook = db.session.get(Wordbook, wordbook_id)
        if wordbook is None or not wordbook.is_visible_to(user_id):
            raise NotFoundError('Wordbook not found', resource='wordbook')
        return wordbook

    @staticmethod
    def get_owned(wordbook_id: int, user_id: int) -> Wordbook:
        wordbook = db.session.get(Wordbook, wordbook_id)
        if wordbook is None or wordbook.created_by != user_id:
            raise NotFoundError('Wordbook not found or no permission', resource='wordbook')
        return wordbook

    @staticmethod
    def create(user_id: int, name: str, description: Optional[str] = None) -> Wordbook:
        wordbook = Wordbook(
            name=name,
            description=description or '',
            kind=Wordbook.KIND_USER_UPLOAD,
            created_by=user_id,
            total_words=0,
        )
        db.session.add(wordbook)
        safe_commit(db.session)
        current_app.logger.info(f"User {user_id} created wordbook {wordbook.id} '{name}'")
        return wordbook

    @staticmethod
    def delete(wordbook: Wordbook) -> None:
        wordbook_id = wordbook.id
        db.session.delete(wordbook)
        safe_commit(db.session)
        current_app.logger.info(f"Deleted wordbook {wordbook_id}")

    @staticmethod
    def words_page(wordbook: Wordbook, page: int, per_page: int) -> Tuple[List[Word], Dict[str, int]]:
        query = Word.query.filter_by(wordbook_id=wordbook.id)
        total = query.count()
        words = query.order_by(Word.word, Word.id).offset((page - 1) * per_page).limit(per_page).all()
        pagination = {
            'page': page,
            'limit': per_page,
            'total': total,
            'pages': (total + per_page - 1) // per_page,
        }
        return words, pagination

    @staticmethod
    def add_words(wordbook: Wordbook, entries: Iterable[Dict[str, str]], source: str = 'manual') -> Tuple[int, int]:
        """
        Insert ``entries`` into ``wordbook``, ignoring words already present.

        Each entry needs a ``word`` key; other keys matching ``WORD_FIELDS``
        are copied. Duplicate-key conflicts count as skipped; an unrecognised
        integrity failure is logged and the row skipped, without failing the
        batch. Commits, refreshes ``total_words`` and returns
        ``(inserted, skipped)``.
        """
        existing = {
            row.word for row in Word.query.filter_by(wordbook_id=wordbook.id).with_entities(Word.word).all()
        }
        inserted = 0
        skipped = 0

        for entry in entries:
            text = (entry.get('word') or '').strip()
            if not text or text in existing:
                skipped += 1
                continue

            word = Word(word=text, wordbook_id=wordbook.id)
            for field in WORD_FIELDS:
                value = entry.get(field)
                if value:
                    setattr(word, field, value)
            try:
                with db.session.begin_nested():
                    db.session.add(word)
            except IntegrityError as exc:
                if not _is_duplicate_error(exc):
                    current_app.logger.error(f"Insert word error for '{text}': {exc}")
                skipped += 1
                continue

            existing.add(text)
            inserted += 1

        wordbook.refresh_word_count()
        safe_commit(db.session)

        words_imported.send(
            current_app._get_current_object(),
            wordbook_id=wordbook.id,
            inserted=inserted,
            skipped=skipped,
            source=source,
        )
        return inserted, skipped

    @staticmethod
    def import_table(wordbook: Wordbook, stream, filename: str) -> Dict[str, int]:
        """Import words from an uploaded CSV/XLSX into ``wordbook``."""
        if not is_supported_filename(filename):
            raise ValidationError('Only CSV or XLSX files are allowed')
        try:
            rows = extract_word_rows(read_word_table(stream, filename))
        except WordTableError as exc:
            current_app.logger.warning(f"Rejected upload {filename}: {exc}")
            raise ValidationError(str(exc))

        if not rows:
            raise ValidationError('No valid words found in file')

        inserted, skipped = WordbookService.add_words(wordbook, rows, source='upload')
        current_app.logger.info(
            f"Imported {filename} into wordbook {wordbook.id}: {inserted} inserted, {skipped} skipped"
        )
        return {'inserted': inserted, 'skipped': skipped, 'total': len(rows)}
