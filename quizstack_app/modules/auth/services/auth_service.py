"""
Auth Service - Core authentication logic.

Handles user registration and credential checks.
Decouples DB logic from Routes.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from quizstack_app.core.error_handlers import ValidationError
from quizstack_app.core.signals import user_registered
from quizstack_app.models import User, db


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def register_user(username, password):
        """
        Register a new user and emit signal.

        Returns:
            User object if successful
        Raises:
            ValidationError if the username is taken
        """
        user = User(username=username, user_role=User.ROLE_USER)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise ValidationError('Username already exists', errors={'username': ['Username already exists.']}) from exc

        current_app.logger.info(f"User registered: {username} ({user.user_id})")

        user_registered.send(current_app._get_current_object(), user=user)
        return user

    @staticmethod
    def authenticate_user(username, password):
        """
        Verify credentials.

        Returns:
            User object if valid, None otherwise.
        """
        user = User.query.filter_by(username=username).first()

        if user and user.check_password(password):
            return user

        return None
