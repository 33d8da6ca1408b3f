# File: wordmem_app/modules/analysis/routes/api.py
from flask import jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import ValidationError, success_response
from wordmem_app.utils.request_args import parse_positive_int
from .. import analysis_bp as blueprint
from ..logics.aggregation import GROUP_BY_CHOICES
from ..services.analytics_service import AnalyticsService


def _days():
    return parse_positive_int(request.args.get('days'), 'days', default=30)


@blueprint.route('/overview', methods=['GET'])
@login_required
def overview():
    return jsonify(success_response(AnalyticsService.overview(current_user.id, _days())))


@blueprint.route('/session/<int:session_id>', methods=['GET'])
@login_required
def session_analysis(session_id):
    return jsonify(success_response(AnalyticsService.session_analysis(current_user.id, session_id)))


@blueprint.route('/progress', methods=['GET'])
@login_required
def progress():
    group_by = request.args.get('groupBy') or 'day'
    if group_by not in GROUP_BY_CHOICES:
        raise ValidationError(
            f"groupBy must be one of {', '.join(GROUP_BY_CHOICES)}", errors={'groupBy': group_by}
        )
    return jsonify(success_response(AnalyticsService.progress(current_user.id, _days(), group_by)))


@blueprint.route('/word-mastery', methods=['GET'])
@login_required
def word_mastery():
    limit = parse_positive_int(request.args.get('limit'), 'limit', default=50)
    return jsonify(success_response(AnalyticsService.word_mastery(current_user.id, _days(), limit)))


@blueprint.route('/recommendations', methods=['GET'])
@login_required
def recommendations():
    limit = parse_positive_int(request.args.get('limit'), 'limit', default=10)
    return jsonify(success_response(AnalyticsService.recommendations(current_user.id, limit)))
