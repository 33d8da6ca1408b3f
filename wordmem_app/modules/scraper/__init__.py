# File: wordmem_app/modules/scraper/__init__.py
from flask import Blueprint

scraper_bp = Blueprint('scraper', __name__)

module_metadata = {
    'name': 'Vocabulary Import',
    'category': 'Content',
    'url_prefix': '/api/scraper',
    'enabled': True
}

from . import routes  # noqa: E402,F401
