"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker namespaces to enable decoupled communication between modules.

Usage:
    # Publisher (sender)
    from quizstack_app.core.signals import quiz_deleted
    quiz_deleted.send(None, quiz_id=3, user_id=1)

    # Subscriber (receiver) - in module's events.py
    @quiz_deleted.connect
    def on_quiz_deleted(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Account Signals
# ============================================
account_signals = Namespace()

# Signal: Fired after a user account is created
# Payload: user
user_registered = account_signals.signal('user_registered')

# ============================================
# Content Management Signals
# ============================================
content_signals = Namespace()

# Signal: Fired when a quiz is created (or seeded)
# Payload: quiz_id, title, question_count, user_id
quiz_created = content_signals.signal('quiz_created')

# Signal: Fired right before a quiz is deleted; listeners share its transaction
# Payload: quiz_id, user_id
quiz_deleted = content_signals.signal('quiz_deleted')

# ============================================
# Quiz Session Signals
# ============================================
quiz_signals = Namespace()

# Signal: Fired when an attempt reaches the completed state
# Payload: user_id, quiz_id, score, total, percent, outcome
attempt_completed = quiz_signals.signal('attempt_completed')

# Signal: Fired after a score record has been stored
# Payload: user_id, quiz_id, score_id, score, total
score_submitted = quiz_signals.signal('score_submitted')
