# File: wordmem_app/core/config.py
# Core Infrastructure Layer: application configuration

import os
from dotenv import load_dotenv

load_dotenv()

# Project root (this file lives in wordmem_app/core/)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "wordmem.db")


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Wordmem application configuration."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
    if SQLALCHEMY_DATABASE_URI.startswith('sqlite'):
        SQLALCHEMY_ENGINE_OPTIONS['connect_args'] = {'timeout': 30}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer tokens stay valid for 7 days
    AUTH_TOKEN_MAX_AGE = int(os.environ.get('AUTH_TOKEN_MAX_AGE', 7 * 24 * 3600))
    AUTH_TOKEN_SALT = 'wordmem-auth'

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'uploads')
    AUDIO_FOLDER = os.environ.get('AUDIO_FOLDER') or os.path.join(BASE_DIR, 'audio')
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024
    AUDIO_SOURCE_URL = os.environ.get(
        'AUDIO_SOURCE_URL',
        'http://dict.youdao.com/dictvoice?type={type}&audio={word}',
    )
    AUDIO_DOWNLOAD_TIMEOUT = 15

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_JSON = _env_bool('LOG_JSON')

    SEED_DEFAULT_DATA = _env_bool('SEED_DEFAULT_DATA', True)

    DEFAULT_ROUND_WORD_COUNT = 10
    ERROR_LIST_LIMIT = 100
    WORDS_PER_PAGE = 50

    @classmethod
    def init_app(cls, app):
        """Create the directories the app writes into."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
        os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
        os.makedirs(app.config['AUDIO_FOLDER'], exist_ok=True)
