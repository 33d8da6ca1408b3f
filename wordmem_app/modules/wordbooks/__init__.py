# File: wordmem_app/modules/wordbooks/__init__.py
from flask import Blueprint

wordbooks_bp = Blueprint('wordbooks', __name__)

module_metadata = {
    'name': 'Wordbooks',
    'category': 'Content',
    'url_prefix': '/api/wordbooks',
    'enabled': True
}

from . import routes  # noqa: E402,F401
