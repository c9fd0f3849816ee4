from .repository import QuizRepository
from .session_service import QuizSessionService
from .submission import SubmissionCoordinator

__all__ = ['QuizRepository', 'QuizSessionService', 'SubmissionCoordinator']
