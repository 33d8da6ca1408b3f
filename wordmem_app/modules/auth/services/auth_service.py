"""
Auth Service - Core authentication logic.

Handles user registration and credential checks.
Decouples DB logic from Routes.
"""
from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from wordmem_app.core.error_handlers import ConflictError
from wordmem_app.core.signals import user_registered
from wordmem_app.models import User, db
from wordmem_app.utils.db_session import safe_commit


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def register_user(username, email, password):
        """
        Register a new user and emit ``user_registered``.

        Raises:
            ConflictError: username or email already taken.
        """
        existing = User.query.filter(or_(User.username == username, User.email == email)).first()
        if existing is not None:
            raise ConflictError('Username or email already exists')

        user = User(username=username, email=email)
        user.set_password(password)
        db.session.add(user)
        try:
            safe_commit(db.session)
        except IntegrityError:
            db.session.rollback()
            raise ConflictError('Username or email already exists')

        current_app.logger.info(f"User registered: {username} ({user.id})")

        try:
            user_registered.send(current_app._get_current_object(), user=user)
        except Exception as e:
            current_app.logger.error(f"Error emitting user_registered signal: {e}")

        return user

    @staticmethod
    def authenticate_user(username_or_email, password):
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = User.query.filter(
            or_(User.username == username_or_email, User.email == username_or_email.lower())
        ).first()

        if user and user.check_password(password):
            return user

        return None
