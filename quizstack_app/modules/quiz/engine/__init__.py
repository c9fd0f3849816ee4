"""Pure quiz-session engine: derivation, the attempt state machine and scoring."""

from .attempt import (
    AttemptLoader,
    AttemptRestoreError,
    AttemptResult,
    AttemptState,
    Feedback,
    LoadTicket,
    advance,
    current_feedback,
    current_question,
    has_selected_answer,
    progress,
    restore_attempt,
    retake,
    select_answer,
    serialize_attempt,
    start_attempt,
    start_next,
    summarize,
)
from .deriver import derive_initial, derive_retake, ensure_valid_question, split_failed
from .scorer import (
    DEFAULT_PASS_THRESHOLD,
    Outcome,
    build_answer_reports,
    build_review,
    classify,
    compute_percent,
    compute_score,
)

__all__ = [
    'AttemptLoader', 'AttemptRestoreError', 'AttemptResult', 'AttemptState', 'Feedback',
    'LoadTicket', 'advance', 'current_feedback', 'current_question', 'has_selected_answer',
    'progress', 'restore_attempt', 'retake', 'select_answer', 'serialize_attempt',
    'start_attempt', 'start_next', 'summarize',
    'derive_initial', 'derive_retake', 'ensure_valid_question', 'split_failed',
    'DEFAULT_PASS_THRESHOLD', 'Outcome', 'build_answer_reports', 'build_review',
    'classify', 'compute_percent', 'compute_score',
]
