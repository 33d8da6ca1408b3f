"""
Token Service - bearer token issuance and verification.

Tokens are signed, timestamped payloads produced with itsdangerous and
resolved into users by a Flask-Login request loader.
"""
from flask import current_app, g
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from wordmem_app.core.error_handlers import AuthenticationError, AuthorizationError
from wordmem_app.models import User, db


def _get_serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(
        current_app.config['SECRET_KEY'],
        salt=current_app.config.get('AUTH_TOKEN_SALT', 'wordmem-auth'),
    )


def issue_token(user: User) -> str:
    return _get_serializer().dumps({'user_id': user.id, 'username': user.username})


def load_user_from_token(token: str) -> User:
    """Resolve a token to its user; raise AuthorizationError when unusable."""
    max_age = current_app.config.get('AUTH_TOKEN_MAX_AGE')
    try:
        payload = _get_serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        raise AuthorizationError('Token has expired')
    except BadSignature:
        raise AuthorizationError('Invalid token')

    user_id = payload.get('user_id') if isinstance(payload, dict) else None
    user = db.session.get(User, user_id) if user_id is not None else None
    if user is None:
        raise AuthorizationError('Invalid token')
    return user


def extract_bearer_token(header_value: str):
    scheme, _, token = (header_value or '').partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def register_token_loader(manager) -> None:
    """Install the bearer-token request loader and the JSON unauthorized handler."""

    @manager.request_loader
    def load_user_from_request(request):
        token = extract_bearer_token(request.headers.get('Authorization'))
        if token is None:
            return None
        try:
            return load_user_from_token(token)
        except AuthorizationError as exc:
            g.auth_failure = exc.message
            return None

    @manager.unauthorized_handler
    def unauthorized():
        failure = g.get('auth_failure')
        if failure:
            raise AuthorizationError(failure)
        raise AuthenticationError('Access token required')
