# File: wordmem_app/modules/errors/routes/api.py
from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import success_response
from wordmem_app.utils.request_args import parse_positive_int
from .. import errors_bp as blueprint
from ..schemas import CreateRoundPayload, GenerateRoundPayload, RoundStatusPayload
from ..services.error_service import ErrorService
from ..services.round_service import RoundService


def _round_body(training_round):
    body = training_round.to_dict()
    body['words'] = [link.word.to_dict() for link in training_round.round_words if link.word is not None]
    return body


@blueprint.route('', methods=['GET'])
@blueprint.route('/', methods=['GET'])
@login_required
def list_errors():
    args = request.args
    errors = ErrorService.list_errors(
        current_user.id,
        session_id=parse_positive_int(args.get('sessionId'), 'sessionId'),
        word_id=parse_positive_int(args.get('wordId'), 'wordId'),
        error_type=args.get('errorType') or None,
        limit=parse_positive_int(args.get('limit'), 'limit', default=current_app.config.get('ERROR_LIST_LIMIT', 100)),
    )
    return jsonify(success_response([error.to_dict() for error in errors]))


@blueprint.route('/stats', methods=['GET'])
@login_required
def error_stats():
    stats = ErrorService.error_stats(
        current_user.id,
        days=parse_positive_int(request.args.get('days'), 'days', default=30),
        session_id=parse_positive_int(request.args.get('sessionId'), 'sessionId'),
    )
    return jsonify(success_response(stats))


@blueprint.route('/top-errors', methods=['GET'])
@login_required
def top_errors():
    rows = ErrorService.top_errors(
        current_user.id,
        limit=parse_positive_int(request.args.get('limit'), 'limit', default=20),
        days=parse_positive_int(request.args.get('days'), 'days', default=30),
    )
    return jsonify(success_response(rows))


@blueprint.route('/training-rounds', methods=['POST'])
@login_required
def create_training_round():
    payload = CreateRoundPayload.model_validate(request.get_json(silent=True) or {})
    training_round = RoundService.create_round(
        current_user.id, payload.session_id, payload.word_ids, payload.round_number
    )
    return jsonify(success_response(_round_body(training_round), 'Error training round created successfully')), 201


@blueprint.route('/training-rounds', methods=['GET'])
@login_required
def list_training_rounds():
    rounds = RoundService.list_rounds(
        current_user.id,
        session_id=parse_positive_int(request.args.get('sessionId'), 'sessionId'),
        status=request.args.get('status') or 'active',
    )
    return jsonify(success_response([training_round.to_dict() for training_round in rounds]))


@blueprint.route('/training-rounds/<int:round_id>/status', methods=['PUT'])
@login_required
def update_training_round_status(round_id):
    payload = RoundStatusPayload.model_validate(request.get_json(silent=True) or {})
    training_round = RoundService.get_owned_round(current_user.id, round_id)
    training_round = RoundService.update_status(training_round, payload.status, payload.completed_at)
    return jsonify(success_response(training_round.to_dict(), 'Error training round status updated successfully'))


@blueprint.route('/generate-random-round', methods=['POST'])
@login_required
def generate_random_round():
    payload = GenerateRoundPayload.model_validate(request.get_json(silent=True) or {})
    training_round = RoundService.generate_random_round(
        current_user.id,
        payload.session_id,
        word_count=payload.word_count,
        round_number=payload.round_number,
    )
    return jsonify(success_response(_round_body(training_round), 'Random error training round created successfully')), 201


@blueprint.route('/<int:error_id>', methods=['DELETE'])
@login_required
def delete_error(error_id):
    ErrorService.delete_error(current_user.id, error_id)
    return jsonify(success_response(message='Error record deleted successfully'))
