# File: wordmem_app/modules/scraper/routes/api.py
from flask import jsonify
from flask_login import login_required

from wordmem_app.core.error_handlers import success_response
from .. import scraper_bp as blueprint
from ..services.seed_service import SystemWordbookService

LIST_LABELS = {'cet4': 'CET-4', 'ielts': 'IELTS', 'toefl': 'TOEFL'}


def _import(key):
    result = SystemWordbookService.import_list(key)
    return jsonify(success_response(result, f'{LIST_LABELS[key]} words imported successfully'))


@blueprint.route('/cet4', methods=['POST'])
@login_required
def import_cet4():
    return _import('cet4')


@blueprint.route('/ielts', methods=['POST'])
@login_required
def import_ielts():
    return _import('ielts')


@blueprint.route('/toefl', methods=['POST'])
@login_required
def import_toefl():
    return _import('toefl')
