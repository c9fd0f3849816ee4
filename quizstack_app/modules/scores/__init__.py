"""Scores module: stored attempt results and the user's history."""

from .routes import blueprint as scores_bp
from .events import register_events


def setup_module(app):
    """Connect the module's signal listeners."""
    register_events()
    app.logger.debug("Scores module initialized.")
