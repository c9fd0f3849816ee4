# File: quizstack_app/modules/auth/__init__.py
"""Auth module: registration, login and the current-user endpoint."""

from .routes import blueprint as auth_bp
