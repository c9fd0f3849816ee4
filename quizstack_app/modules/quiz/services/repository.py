# File: quizstack_app/modules/quiz/services/repository.py
"""SQLAlchemy-backed access to quizzes, exposed to the rest of the app as DTOs."""

from typing import Iterable, List, Mapping, Optional, Sequence

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.attributes import flag_modified

from quizstack_app.core.error_handlers import NotFoundError
from quizstack_app.models import Quiz, QuizQuestion, db
from ..exceptions import QuizAccessDeniedError, QuizNotFoundError
from ..schemas import QuestionDTO, QuizDTO, QuizSummaryDTO


class QuizRepository:
    """Reads and writes quizzes; visibility rules are enforced on reads."""

    # --- Mapping -------------------------------------------------------

    @staticmethod
    def to_question_dto(question: QuizQuestion) -> QuestionDTO:
        return QuestionDTO(
            id=question.question_id,
            question_text=question.question_text,
            options=list(question.options or []),
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            points=question.points or 1,
            original_question_source=question.original_question_source,
        )

    @classmethod
    def to_quiz_dto(cls, quiz: Quiz) -> QuizDTO:
        return QuizDTO(
            id=quiz.quiz_id,
            title=quiz.title,
            category=quiz.category,
            description=quiz.description,
            questions=[cls.to_question_dto(q) for q in quiz.questions],
            created_by=quiz.created_by,
            created_at=quiz.created_at,
            authorized_users=list(quiz.authorized_users or []),
        )

    @staticmethod
    def to_summary_dto(quiz: Quiz) -> QuizSummaryDTO:
        return QuizSummaryDTO(
            id=quiz.quiz_id,
            title=quiz.title,
            category=quiz.category,
            question_count=len(quiz.questions),
            description=quiz.description,
        )

    @staticmethod
    def _build_question(data: Mapping, position: int) -> QuizQuestion:
        return QuizQuestion(
            position=position,
            question_text=data['question_text'],
            options=list(data['options']),
            correct_answer=data['correct_answer'],
            explanation=data.get('explanation'),
            points=data.get('points') or 1,
            original_question_source=data.get('original_question_source'),
        )

    # --- Reads ---------------------------------------------------------

    @staticmethod
    def get_model(quiz_id: int) -> Quiz:
        quiz = db.session.get(Quiz, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz

    @classmethod
    def fetch_quiz(cls, quiz_id: int, user) -> QuizDTO:
        """Load a quiz the user may take. Raises a ``FetchError`` subclass otherwise."""
        quiz = cls.get_model(quiz_id)
        if not quiz.is_visible_to(user):
            raise QuizAccessDeniedError(quiz_id)
        return cls.to_quiz_dto(quiz)

    @classmethod
    def fetch_quiz_list(cls, user) -> List[QuizSummaryDTO]:
        """Quizzes visible to ``user``, oldest first."""
        quizzes = Quiz.query.order_by(Quiz.created_at.asc(), Quiz.quiz_id.asc()).all()
        return [cls.to_summary_dto(q) for q in quizzes if q.is_visible_to(user)]

    # --- Writes --------------------------------------------------------

    @staticmethod
    def _commit():
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Quiz write failed, transaction rolled back")
            raise

    @classmethod
    def create_quiz(cls, payload: Mapping, creator_id: Optional[int] = None) -> QuizDTO:
        quiz = Quiz(
            title=payload['title'],
            category=payload['category'],
            description=payload.get('description'),
            created_by=creator_id,
            authorized_users=list(payload.get('authorized_users') or []),
        )
        quiz.questions = [cls._build_question(q, pos) for pos, q in enumerate(payload['questions'])]
        db.session.add(quiz)
        cls._commit()
        return cls.to_quiz_dto(quiz)

    @classmethod
    def append_questions(cls, quiz_id: int, questions: Sequence[Mapping]) -> QuizDTO:
        quiz = cls.get_model(quiz_id)
        start = max((q.position for q in quiz.questions), default=-1) + 1
        for offset, data in enumerate(questions):
            quiz.questions.append(cls._build_question(data, start + offset))
        cls._commit()
        return cls.to_quiz_dto(quiz)

    @classmethod
    def update_question(cls, quiz_id: int, question_id: int, patch: QuestionDTO) -> QuizDTO:
        """Replace one question's content in place; its id and position are kept."""
        quiz = cls.get_model(quiz_id)
        question = next((q for q in quiz.questions if q.question_id == question_id), None)
        if question is None:
            raise NotFoundError(f'Question {question_id} is not part of quiz {quiz_id}', resource='question')

        question.question_text = patch.question_text
        question.options = list(patch.options)
        question.correct_answer = patch.correct_answer
        question.explanation = patch.explanation
        question.points = patch.points
        question.original_question_source = patch.original_question_source
        flag_modified(question, 'options')
        cls._commit()
        return cls.to_quiz_dto(quiz)

    @classmethod
    def assign_users(cls, quiz_id: int, usernames: Iterable[str]) -> QuizDTO:
        quiz = cls.get_model(quiz_id)
        unique = []
        for name in usernames:
            name = (name or '').strip()
            if name and name not in unique:
                unique.append(name)
        quiz.authorized_users = unique
        flag_modified(quiz, 'authorized_users')
        cls._commit()
        return cls.to_quiz_dto(quiz)

    @classmethod
    def delete_quiz(cls, quiz_id: int) -> str:
        """Delete a quiz with its questions; returns the deleted title."""
        quiz = cls.get_model(quiz_id)
        title = quiz.title
        db.session.delete(quiz)
        cls._commit()
        return title

