import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wordmem_app import create_app, db
from wordmem_app.config import Config
from wordmem_app.models import Word, Wordbook


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    SEED_DEFAULT_DATA = False
    LOG_DIR = None
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app(tmp_path):
    # Requests push their own app context, so per-request state never leaks between calls
    config = type('IsolatedTestConfig', (TestConfig,), {
        'AUDIO_FOLDER': str(tmp_path / 'audio'),
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    })
    app = create_app(config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username='alice', email=None, password='secret123'):
    response = client.post('/api/auth/register', json={
        'username': username,
        'email': email or f'{username}@example.com',
        'password': password,
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


@pytest.fixture
def auth_headers(client):
    """Factory: register a user and return bearer headers for it."""
    def _make(username='alice'):
        data = register(client, username=username)
        return {'Authorization': f"Bearer {data['token']}"}
    return _make


@pytest.fixture
def wordbook_factory(app):
    def _make(user_id=None, name='My Book', words=(), kind=Wordbook.KIND_USER_UPLOAD):
        with app.app_context():
            wordbook = Wordbook(name=name, kind=kind, created_by=user_id, total_words=len(words))
            db.session.add(wordbook)
            db.session.flush()
            for text in words:
                db.session.add(Word(word=text, wordbook_id=wordbook.id))
            db.session.commit()
            word_ids = [
                word.id for word in Word.query.filter_by(wordbook_id=wordbook.id).order_by(Word.id).all()
            ]
            return wordbook.id, word_ids
    return _make
