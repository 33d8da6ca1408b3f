# File: wordmem_app/modules/auth/routes/api.py
from dataclasses import asdict

from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from wordmem_app.core.error_handlers import AuthenticationError, success_response
from wordmem_app.utils.time_utils import isoformat
from .. import auth_bp as blueprint
from ..schemas import AuthResponseDTO, LoginPayload, RegisterPayload, UserDTO
from ..services.auth_service import AuthService
from ..services.token_service import issue_token


def _user_dto(user) -> UserDTO:
    return UserDTO(id=user.id, username=user.username, email=user.email, created_at=isoformat(user.created_at))


@blueprint.route('/register', methods=['POST'])
def register():
    payload = RegisterPayload.model_validate(request.get_json(silent=True) or {})
    user = AuthService.register_user(payload.username, payload.email, payload.password)
    body = AuthResponseDTO(token=issue_token(user), user=_user_dto(user))
    return jsonify(success_response(asdict(body), 'User created successfully')), 201


@blueprint.route('/login', methods=['POST'])
def login():
    payload = LoginPayload.model_validate(request.get_json(silent=True) or {})
    user = AuthService.authenticate_user(payload.username, payload.password)
    if user is None:
        current_app.logger.info(f"Failed login attempt for '{payload.username}'")
        raise AuthenticationError('Invalid credentials')
    body = AuthResponseDTO(token=issue_token(user), user=_user_dto(user))
    return jsonify(success_response(asdict(body), 'Login successful'))


@blueprint.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(success_response({'user': asdict(_user_dto(current_user))}))
