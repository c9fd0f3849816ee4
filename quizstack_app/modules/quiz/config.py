# File: quizstack_app/modules/quiz/config.py


class QuizSessionConfig:
    """
    Default configuration for the Quiz module.
    Values in the Flask app config (same key) take precedence.
    """
    # Maximum number of questions drawn for a fresh attempt
    QUIZ_QUESTION_CAP = 20
    # Copies of each question in a retake
    QUIZ_RETAKE_REPEAT_FACTOR = 4
    # Inclusive pass mark, in percent
    QUIZ_PASS_THRESHOLD = 80.0

    SESSION_KEY = 'quiz_attempt'


def get_quiz_setting(key: str):
    """Read a quiz setting from the running app's config, falling back to the module default."""
    default = getattr(QuizSessionConfig, key)
    try:
        from flask import current_app
        value = current_app.config.get(key, default)
    except RuntimeError:
        # Outside an application context
        return default
    if value is None:
        return default
    return type(default)(value)
