"""Quiz module: quiz listing and the learner's attempt session."""

from .routes import blueprint as quiz_bp
from .events import register_events


def setup_module(app):
    """Connect the module's signal listeners."""
    register_events()
    app.logger.debug("Quiz module initialized.")
