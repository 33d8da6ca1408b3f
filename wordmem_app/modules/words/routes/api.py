# File: wordmem_app/modules/words/routes/api.py
from flask import jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import ValidationError, success_response
from wordmem_app.modules.wordbooks.services.wordbook_service import WordbookService
from wordmem_app.utils.request_args import parse_positive_int
from .. import words_bp as blueprint
from ..schemas import BatchWordsPayload, CreateWordPayload, DownloadAudioPayload
from ..services.audio_service import AudioService, normalize_accent
from ..services.word_service import WordService


@blueprint.route('', methods=['GET'])
@blueprint.route('/', methods=['GET'])
@login_required
def list_words():
    wordbook_id = parse_positive_int(request.args.get('wordbook_id'), 'wordbook_id')
    if wordbook_id is None:
        raise ValidationError('wordbook_id is required')
    wordbook = WordbookService.get_visible(wordbook_id, current_user.id)
    words = WordService.list_words(wordbook)
    return jsonify(success_response([word.to_dict() for word in words]))


@blueprint.route('', methods=['POST'])
@blueprint.route('/', methods=['POST'])
@login_required
def create_word():
    payload = CreateWordPayload.model_validate(request.get_json(silent=True) or {})
    wordbook = WordbookService.get_owned(payload.wordbook_id, current_user.id)
    fields = payload.model_dump(exclude={'word', 'wordbook_id'}, exclude_none=True)
    word, created = WordService.create_word(wordbook, payload.word, fields)
    body = dict(word.to_dict(), created=created)
    message = 'Word added successfully' if created else 'Word already exists'
    return jsonify(success_response(body, message)), 201 if created else 200


@blueprint.route('/batch', methods=['POST'])
@login_required
def create_words_batch():
    payload = BatchWordsPayload.model_validate(request.get_json(silent=True) or {})
    wordbook = WordbookService.get_owned(payload.wordbook_id, current_user.id)
    entries = payload.entries()
    if not entries:
        raise ValidationError('Words array is required')
    added, skipped = WordbookService.add_words(wordbook, entries, source='batch')
    return jsonify(success_response(
        {'added': added, 'skipped': skipped, 'total_words': wordbook.total_words},
        f'Successfully processed {len(entries)} words',
    ))


@blueprint.route('/<int:word_id>/audio', methods=['GET'])
@login_required
def word_audio(word_id):
    accent = normalize_accent(request.args.get('accent'))
    word = WordService.get_visible_word(word_id, current_user.id)
    return jsonify(success_response({
        'audioUrl': AudioService.remote_url(word, accent),
        'word': word.word,
        'accent': accent,
    }))


@blueprint.route('/<int:word_id>/download-audio', methods=['POST'])
@login_required
def download_audio(word_id):
    payload = DownloadAudioPayload.model_validate(request.get_json(silent=True) or {})
    accent = normalize_accent(payload.accent)
    word = WordService.get_visible_word(word_id, current_user.id)
    local_url = AudioService.download(word, accent)
    return jsonify(success_response(
        {'audioUrl': local_url, 'word': word.word, 'accent': accent},
        'Audio downloaded successfully',
    ))


@blueprint.route('/<int:word_id>', methods=['DELETE'])
@login_required
def delete_word(word_id):
    word = WordService.get_owned_word(word_id, current_user.id)
    WordService.delete_word(word)
    return jsonify(success_response(message='Word deleted successfully'))


@blueprint.route('/search/<path:query>', methods=['GET'])
@login_required
def search_words(query):
    limit = parse_positive_int(request.args.get('limit'), 'limit', default=50, maximum=500)
    words = WordService.search(current_user.id, query.strip(), limit)
    return jsonify(success_response([word.to_dict() for word in words]))
