# File: wordmem_app/modules/words/__init__.py
from flask import Blueprint

words_bp = Blueprint('words', __name__)

module_metadata = {
    'name': 'Words',
    'category': 'Content',
    'url_prefix': '/api/words',
    'enabled': True
}

from . import routes  # noqa: E402,F401
