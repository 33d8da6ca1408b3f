"""
System wordbook import.

Used both by the ``/api/scraper/<list>`` endpoints and by start-up seeding.
"""
from typing import Dict

from flask import current_app

from wordmem_app.core.error_handlers import NotFoundError
from wordmem_app.models import Wordbook, db
from wordmem_app.modules.wordbooks.services.wordbook_service import WordbookService
from wordmem_app.utils.db_session import safe_commit
from ..data import SYSTEM_WORDBOOKS


class SystemWordbookService:

    @staticmethod
    def ensure_wordbook(key: str) -> Wordbook:
        """Return the system wordbook for ``key``, creating it when missing."""
        definition = SYSTEM_WORDBOOKS.get(key)
        if definition is None:
            raise NotFoundError(f"Unknown vocabulary list '{key}'", resource='vocabulary_list')

        wordbook = Wordbook.query.filter_by(name=definition['name'], kind=Wordbook.KIND_SYSTEM).first()
        if wordbook is None:
            wordbook = Wordbook(
                name=definition['name'],
                description=definition['description'],
                source=definition['source'],
                kind=Wordbook.KIND_SYSTEM,
                total_words=0,
            )
            db.session.add(wordbook)
            safe_commit(db.session)
            current_app.logger.info(f"Created system wordbook '{wordbook.name}' ({wordbook.id})")
        return wordbook

    @staticmethod
    def import_list(key: str) -> Dict[str, int]:
        """Insert-ignore the bundled words of ``key`` into its system wordbook."""
        wordbook = SystemWordbookService.ensure_wordbook(key)
        entries = [
            {'word': word, 'definition': definition, 'example_sentence': example}
            for word, definition, example in SYSTEM_WORDBOOKS[key]['words']
        ]
        inserted, _skipped = WordbookService.add_words(wordbook, entries, source=f'system:{key}')
        return {'wordbook_id': wordbook.id, 'inserted': inserted, 'total': wordbook.total_words}
