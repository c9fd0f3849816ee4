from quizstack_app.core.error_handlers import QuizStackError


class FetchError(QuizStackError):
    """The quiz could not be loaded, so no attempt was started."""

    def __init__(self, message: str = 'Quiz could not be loaded', code: str = 'FETCH_ERROR',
                 status_code: int = 502, quiz_id=None):
        self.quiz_id = quiz_id
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details={'quiz_id': quiz_id} if quiz_id is not None else None
        )


class QuizNotFoundError(FetchError):
    def __init__(self, quiz_id=None, message: str = 'Quiz not found'):
        super().__init__(message=message, code='QUIZ_NOT_FOUND', status_code=404, quiz_id=quiz_id)


class QuizAccessDeniedError(FetchError):
    def __init__(self, quiz_id=None, message: str = 'You are not allowed to take this quiz'):
        super().__init__(message=message, code='QUIZ_ACCESS_DENIED', status_code=403, quiz_id=quiz_id)


class SubmissionError(QuizStackError):
    """Storing a score failed. The completed attempt is kept for a retry."""

    def __init__(self, message: str = 'Score could not be saved, please retry'):
        super().__init__(message=message, code='SUBMISSION_FAILED', status_code=503)


class AttemptStateError(QuizStackError):
    """A transition was requested that the attempt's current state forbids."""

    def __init__(self, message: str, action: str = None):
        self.action = action
        super().__init__(
            message=message,
            code='ILLEGAL_TRANSITION',
            status_code=409,
            details={'action': action} if action else None
        )


class NoActiveAttemptError(QuizStackError):
    def __init__(self, message: str = 'No quiz attempt in progress'):
        super().__init__(message=message, code='NO_ACTIVE_ATTEMPT', status_code=404)
