# File: wordmem_app/modules/wordbooks/routes/api.py
from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import ValidationError, success_response
from wordmem_app.utils.request_args import sanitize_pagination_args
from .. import wordbooks_bp as blueprint
from ..schemas import WordbookPayload
from ..services.wordbook_service import WordbookService


@blueprint.route('', methods=['GET'])
@blueprint.route('/', methods=['GET'])
@login_required
def list_wordbooks():
    wordbooks = WordbookService.list_visible(current_user.id)
    return jsonify(success_response([wordbook.to_dict() for wordbook in wordbooks]))


@blueprint.route('/<int:wordbook_id>', methods=['GET'])
@login_required
def get_wordbook(wordbook_id):
    wordbook = WordbookService.get_visible(wordbook_id, current_user.id)
    return jsonify(success_response(wordbook.to_dict()))


@blueprint.route('/<int:wordbook_id>/words', methods=['GET'])
@login_required
def wordbook_words(wordbook_id):
    wordbook = WordbookService.get_visible(wordbook_id, current_user.id)
    default_limit = current_app.config.get('WORDS_PER_PAGE', 50)
    page, per_page = sanitize_pagination_args(
        request.args.get('page', 1), request.args.get('limit', default_limit), default_per_page=default_limit
    )
    words, pagination = WordbookService.words_page(wordbook, page, per_page)
    return jsonify(success_response({
        'words': [word.to_dict() for word in words],
        'pagination': pagination,
    }))


@blueprint.route('', methods=['POST'])
@blueprint.route('/', methods=['POST'])
@login_required
def create_wordbook():
    payload = WordbookPayload.model_validate(request.get_json(silent=True) or {})
    wordbook = WordbookService.create(current_user.id, payload.name, payload.description)
    return jsonify(success_response(wordbook.to_dict(), 'Wordbook created successfully')), 201


@blueprint.route('/<int:wordbook_id>/upload', methods=['POST'])
@login_required
def upload_words(wordbook_id):
    wordbook = WordbookService.get_owned(wordbook_id, current_user.id)
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValidationError('No file uploaded')

    result = WordbookService.import_table(wordbook, upload.stream, upload.filename)
    return jsonify(success_response(result, 'File uploaded successfully'))


@blueprint.route('/<int:wordbook_id>', methods=['DELETE'])
@login_required
def delete_wordbook(wordbook_id):
    wordbook = WordbookService.get_owned(wordbook_id, current_user.id)
    WordbookService.delete(wordbook)
    return jsonify(success_response(message='Wordbook deleted successfully'))
