# File: wordmem_app/modules/training/routes/api.py
from flask import jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import success_response
from .. import training_bp as blueprint
from ..schemas import CreateSessionPayload, ResultsPayload, StatusPayload
from ..services.result_recorder import ResultRecorder
from ..services.session_service import SessionService


@blueprint.route('/sessions', methods=['POST'])
@login_required
def create_session():
    payload = CreateSessionPayload.model_validate(request.get_json(silent=True) or {})
    session = SessionService.create_session(
        current_user.id, payload.session_name, payload.word_ids, payload.settings
    )
    return jsonify(success_response(session.to_dict(), 'Training session created successfully')), 201


@blueprint.route('/sessions', methods=['GET'])
@login_required
def list_sessions():
    return jsonify(success_response(SessionService.list_sessions(current_user.id)))


@blueprint.route('/sessions/<int:session_id>', methods=['GET'])
@login_required
def get_session(session_id):
    session = SessionService.get_owned(session_id, current_user.id)
    return jsonify(success_response(SessionService.session_detail(session)))


@blueprint.route('/sessions/<int:session_id>/status', methods=['PUT'])
@login_required
def update_session_status(session_id):
    payload = StatusPayload.model_validate(request.get_json(silent=True) or {})
    session = SessionService.get_owned(session_id, current_user.id)
    session = SessionService.update_status(session, payload.status, payload.completed_at)
    return jsonify(success_response(session.to_dict(), 'Training session status updated successfully'))


@blueprint.route('/sessions/<int:session_id>/results', methods=['POST'])
@login_required
def save_results(session_id):
    payload = ResultsPayload.model_validate(request.get_json(silent=True) or {})
    stats = ResultRecorder.record(session_id, current_user.id, payload.results)
    return jsonify(success_response(stats, 'Training results saved successfully'))


@blueprint.route('/sessions/<int:session_id>', methods=['DELETE'])
@login_required
def delete_session(session_id):
    session = SessionService.get_owned(session_id, current_user.id)
    SessionService.delete_session(session)
    return jsonify(success_response(message='Training session deleted successfully'))
