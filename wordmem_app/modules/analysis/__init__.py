# File: wordmem_app/modules/analysis/__init__.py
from flask import Blueprint

analysis_bp = Blueprint('analysis', __name__)

module_metadata = {
    'name': 'Learning Analysis',
    'category': 'Learning',
    'url_prefix': '/api/analysis',
    'enabled': True
}

from . import routes  # noqa: E402,F401
