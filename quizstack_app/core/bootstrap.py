"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

from flask import Flask

from ..extensions import csrf_protect, db, login_manager
from .error_handlers import AuthenticationError
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging if no handlers are present."""

    if app.logger.handlers:
        return

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=bool(app.config.get("LOG_JSON")),
    )
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)
    csrf_protect.init_app(app)


def register_login_handlers(app: Flask) -> None:
    """Register the user loader and the JSON answer for anonymous requests."""

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        try:
            return db.session.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    @login_manager.unauthorized_handler
    def unauthorized():
        raise AuthenticationError()


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables and ensure the default data exists."""

    from ..models import Quiz, User
    from ..modules.admin.services.authoring_service import QuizAuthoringService

    db.create_all()

    username = app.config.get("DEFAULT_ADMIN_USERNAME", "admin")
    admin_user = User.query.filter(
        (User.user_role == User.ROLE_ADMIN) | (User.username == username)
    ).first()
    if admin_user is None:
        admin = User(username=username, user_role=User.ROLE_ADMIN)
        admin.set_password(app.config.get("DEFAULT_ADMIN_PASSWORD", "admin123"))
        db.session.add(admin)
        db.session.commit()
        app.logger.info("Default admin user created (username: %s).", username)
        admin_user = admin
    else:
        app.logger.info("Existing admin user found, skipping default admin creation.")

    if app.config.get("SEED_SAMPLE_QUIZZES") and Quiz.query.count() == 0:
        created = QuizAuthoringService.seed_sample_quizzes(admin_user)
        app.logger.info("Seeded %d sample quizzes.", len(created))
