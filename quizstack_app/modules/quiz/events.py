from flask import current_app

from quizstack_app.core.signals import attempt_completed


def on_attempt_completed(sender, user_id, quiz_id, score, total, percent, outcome, **kwargs):
    """Event listener: record finished attempts in the application log."""
    current_app.logger.info(
        f"User {user_id} finished quiz {quiz_id}: {score}/{total} ({percent:.1f}%) {outcome}"
    )


def register_events():
    """Connect signals."""
    attempt_completed.connect(on_attempt_completed)
