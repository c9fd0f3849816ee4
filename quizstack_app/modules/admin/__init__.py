"""Admin module: quiz authoring and user listing for administrators."""

from .routes import blueprint as admin_bp
