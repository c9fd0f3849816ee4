# File: quizstack_app/modules/admin/services/authoring_service.py
"""
Quiz authoring for administrators.

Payloads are validated before anything is written; listeners are told about
new and deleted quizzes through the content signals.
"""
from typing import Iterable, List

from flask import current_app

from quizstack_app.core.error_handlers import ValidationError
from quizstack_app.core.signals import quiz_created, quiz_deleted
from quizstack_app.models import User
from quizstack_app.modules.quiz import interface as quiz_interface
from quizstack_app.modules.quiz.logics.validation import (
    validate_question_list,
    validate_question_patch,
    validate_quiz_payload,
)
from quizstack_app.modules.quiz.schemas import QuizDTO

SAMPLE_QUIZZES = [
    {
        'title': 'JavaScript Basics',
        'category': 'JavaScript',
        'questions': [
            {
                'questionText': "What is the output of 2 + '2' in JavaScript?",
                'options': ['4', '22', 'NaN', 'Error'],
                'correctAnswer': '22',
                'points': 1,
            },
            {
                'questionText': 'Which keyword declares a variable in JavaScript?',
                'options': ['var', 'let', 'const', 'All of the above'],
                'correctAnswer': 'All of the above',
                'points': 1,
            },
        ],
    },
    {
        'title': 'Node.js Fundamentals',
        'category': 'Node.js',
        'questions': [
            {
                'questionText': 'What is the default port for Express.js?',
                'options': ['3000', '8080', '5000', 'No default'],
                'correctAnswer': 'No default',
                'points': 1,
            },
        ],
    },
]


class QuizAuthoringService:
    """Create, edit, assign and delete quizzes."""

    @staticmethod
    def _announce_created(quiz: QuizDTO, admin) -> None:
        quiz_created.send(
            current_app._get_current_object(),
            quiz_id=quiz.id,
            title=quiz.title,
            question_count=len(quiz.questions),
            user_id=getattr(admin, 'user_id', None),
        )

    @classmethod
    def create(cls, raw, admin) -> QuizDTO:
        payload = validate_quiz_payload(raw)
        quiz = quiz_interface.create_quiz(payload, creator_id=admin.user_id)
        current_app.logger.info(f"Quiz {quiz.id} '{quiz.title}' created with {len(quiz.questions)} questions")
        cls._announce_created(quiz, admin)
        return quiz

    @staticmethod
    def append(quiz_id: int, raw) -> QuizDTO:
        questions = validate_question_list(raw)
        quiz = quiz_interface.append_questions(quiz_id, questions)
        current_app.logger.info(f"Appended {len(questions)} question(s) to quiz {quiz_id}")
        return quiz

    @staticmethod
    def update_question(quiz_id: int, question_id: int, raw) -> QuizDTO:
        """Replace one question and re-derive the caller's attempt on this quiz, if any."""
        patch = validate_question_patch(raw, question_id=question_id)
        quiz = quiz_interface.update_question(quiz_id, question_id, patch)
        quiz_interface.refresh_attempt_for(quiz)
        current_app.logger.info(f"Question {question_id} of quiz {quiz_id} updated")
        return quiz

    @staticmethod
    def assign(quiz_id: int, usernames) -> QuizDTO:
        if not isinstance(usernames, list) or not all(isinstance(u, str) for u in usernames):
            raise ValidationError('usernames must be a list of strings', errors={'usernames': 'invalid'})
        wanted = {u.strip() for u in usernames if u.strip()}
        known = {u.username for u in User.query.filter(User.username.in_(sorted(wanted))).all()} if wanted else set()
        unknown = sorted(wanted - known)
        if unknown:
            raise ValidationError('Unknown users', errors={'usernames': unknown})
        return quiz_interface.assign_users(quiz_id, usernames)

    @staticmethod
    def delete(quiz_id: int, admin) -> str:
        quiz_interface.get_quiz_for_admin(quiz_id)
        # Listeners remove dependent rows in the same transaction.
        quiz_deleted.send(current_app._get_current_object(), quiz_id=quiz_id, user_id=getattr(admin, 'user_id', None))
        title = quiz_interface.delete_quiz(quiz_id)
        current_app.logger.info(f"Quiz {quiz_id} '{title}' deleted")
        return title

    @staticmethod
    def list_users() -> List[dict]:
        from quizstack_app.modules.auth.interface import AuthInterface
        return [u.to_dict() for u in AuthInterface.list_users()]

    @classmethod
    def seed_sample_quizzes(cls, admin_user, replace_existing: bool = False) -> List[QuizDTO]:
        """Insert the sample quizzes, optionally deleting every existing quiz first."""
        if replace_existing:
            for summary in quiz_interface.list_quizzes(admin_user):
                cls.delete(summary.id, admin_user)

        created = []
        for raw in SAMPLE_QUIZZES:
            payload = validate_quiz_payload(raw)
            quiz = quiz_interface.create_quiz(payload, creator_id=admin_user.user_id)
            cls._announce_created(quiz, admin_user)
            created.append(quiz)
        return created
