"""
Pronunciation audio helpers.

Audio comes from a dictionary TTS endpoint (``AUDIO_SOURCE_URL``); a
downloaded copy lives in ``AUDIO_FOLDER`` and is served under ``/audio/``.
"""

import os
from urllib.parse import quote

import requests
from flask import current_app
from werkzeug.utils import secure_filename

from wordmem_app.core.error_handlers import UpstreamError, ValidationError
from wordmem_app.models import Word, db
from wordmem_app.utils.db_session import safe_commit

ACCENT_TYPES = {'us': 0, 'uk': 1}


def normalize_accent(accent) -> str:
    accent = (accent or 'us').strip().lower()
    if accent not in ACCENT_TYPES:
        raise ValidationError("accent must be 'us' or 'uk'")
    return accent


class AudioService:
    """Build remote pronunciation URLs and keep local copies."""

    USER_AGENT = "wordmem/1.0 (+audio fetch)"

    @staticmethod
    def remote_url(word: Word, accent: str) -> str:
        template = current_app.config['AUDIO_SOURCE_URL']
        return template.format(type=ACCENT_TYPES[accent], word=quote(word.word))

    @staticmethod
    def local_filename(word: Word, accent: str) -> str:
        return secure_filename(f"{word.word}_{accent}.mp3") or f"word_{word.id}_{accent}.mp3"

    @staticmethod
    def download(word: Word, accent: str) -> str:
        """Fetch the pronunciation file and point the word's accent URL at it."""
        remote = AudioService.remote_url(word, accent)
        timeout = current_app.config.get('AUDIO_DOWNLOAD_TIMEOUT', 15)
        try:
            response = requests.get(
                remote, timeout=timeout, stream=True, headers={'User-Agent': AudioService.USER_AGENT}
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            current_app.logger.warning(f"Audio download failed for '{word.word}' ({accent}): {exc}")
            raise UpstreamError('Failed to download audio')

        audio_dir = current_app.config['AUDIO_FOLDER']
        os.makedirs(audio_dir, exist_ok=True)
        filename = AudioService.local_filename(word, accent)
        path = os.path.join(audio_dir, filename)

        try:
            with open(path, 'wb') as handle:
                for chunk in response.iter_content(chunk_size=32768):
                    if chunk:
                        handle.write(chunk)
        except (OSError, requests.RequestException) as exc:
            if os.path.exists(path):
                os.remove(path)
            current_app.logger.error(f"Writing audio {path} failed: {exc}", exc_info=True)
            raise UpstreamError('Failed to download audio')

        local_url = f"/audio/{filename}"
        setattr(word, 'audio_url_us' if accent == 'us' else 'audio_url_uk', local_url)
        safe_commit(db.session)
        current_app.logger.info(f"Saved audio for word {word.id} at {local_url}")
        return local_url
