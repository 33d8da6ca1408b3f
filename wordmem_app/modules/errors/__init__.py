# File: wordmem_app/modules/errors/__init__.py
from flask import Blueprint

errors_bp = Blueprint('errors', __name__)

module_metadata = {
    'name': 'Error Review',
    'category': 'Learning',
    'url_prefix': '/api/errors',
    'enabled': True
}

from . import routes  # noqa: E402,F401
