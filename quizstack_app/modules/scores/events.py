from flask import current_app

from quizstack_app.core.signals import quiz_deleted
from .services.score_repository import ScoreRepository


def on_quiz_deleted(sender, quiz_id, **kwargs):
    """Event listener: drop the scores of a quiz that is being deleted."""
    removed = ScoreRepository.delete_for_quiz(quiz_id)
    current_app.logger.info(f"Removed {removed} score(s) of deleted quiz {quiz_id}")


def register_events():
    """Connect signals."""
    quiz_deleted.connect(on_quiz_deleted)
