"""Public API of the quiz module for other modules."""

from typing import List, Mapping, Sequence

from .schemas import QuestionDTO, QuizDTO, QuizSummaryDTO


def _repository():
    from .services.repository import QuizRepository
    return QuizRepository


def list_quizzes(user) -> List[QuizSummaryDTO]:
    return _repository().fetch_quiz_list(user)


def create_quiz(payload: Mapping, creator_id: int = None) -> QuizDTO:
    return _repository().create_quiz(payload, creator_id)


def append_questions(quiz_id: int, questions: Sequence[Mapping]) -> QuizDTO:
    return _repository().append_questions(quiz_id, questions)


def update_question(quiz_id: int, question_id: int, patch: QuestionDTO) -> QuizDTO:
    return _repository().update_question(quiz_id, question_id, patch)


def assign_users(quiz_id: int, usernames: Sequence[str]) -> QuizDTO:
    return _repository().assign_users(quiz_id, usernames)


def get_quiz_for_admin(quiz_id: int) -> QuizDTO:
    repository = _repository()
    return repository.to_quiz_dto(repository.get_model(quiz_id))


def delete_quiz(quiz_id: int) -> str:
    return _repository().delete_quiz(quiz_id)


def refresh_attempt_for(quiz: QuizDTO) -> bool:
    """Re-derive the current session's unfinished attempt after ``quiz`` was edited."""
    from .services.session_service import QuizSessionService
    return QuizSessionService.refresh_quiz(quiz)
