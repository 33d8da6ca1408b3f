# File: wordmem_app/modules/training/__init__.py
from flask import Blueprint

training_bp = Blueprint('training', __name__)

module_metadata = {
    'name': 'Training Sessions',
    'category': 'Learning',
    'url_prefix': '/api/training',
    'enabled': True
}

from . import routes  # noqa: E402,F401
