# File: quizstack_app/modules/scores/services/score_repository.py
from typing import List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from quizstack_app.core.error_handlers import ValidationError
from quizstack_app.models import Quiz, Score, db
from quizstack_app.modules.quiz.exceptions import QuizAccessDeniedError, QuizNotFoundError
from quizstack_app.modules.quiz.schemas import AnswerReportDTO, ScoreRecordDTO


class ScoreRepository:
    """Append-only store of submitted attempts."""

    @staticmethod
    def _check_record(record: ScoreRecordDTO) -> None:
        errors = {}
        if record.total < 1:
            errors['total'] = 'must be positive'
        if not 0 <= record.score <= record.total:
            errors['score'] = 'must be between 0 and total'
        if len(record.answers) != record.total:
            errors['answers'] = 'one answer report per question is required'
        elif sum(1 for a in record.answers if a.is_correct) != record.score:
            errors['score'] = 'does not match the correct answers reported'
        if errors:
            raise ValidationError('Inconsistent score record', errors=errors)

    @classmethod
    def save(cls, record: ScoreRecordDTO, user) -> ScoreRecordDTO:
        """
        Store ``record`` for ``user``.

        Raises ``ValidationError`` for inconsistent data and
        ``QuizAccessDeniedError`` when the user may not see the quiz.
        Storage errors are re-raised after rolling back.
        """
        cls._check_record(record)
        quiz = db.session.get(Quiz, record.quiz_id)
        if quiz is None:
            raise QuizNotFoundError(record.quiz_id)
        if not quiz.is_visible_to(user):
            raise QuizAccessDeniedError(record.quiz_id)

        row = Score(
            user_id=record.user_id,
            quiz_id=record.quiz_id,
            score=record.score,
            total=record.total,
            answers=[
                {
                    'question_id': a.question_id,
                    'selected_answer': a.selected_answer,
                    'is_correct': a.is_correct,
                }
                for a in record.answers
            ],
        )
        try:
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Could not store score for quiz %s", record.quiz_id)
            raise

        return cls.to_record(row)

    @staticmethod
    def to_record(row: Score) -> ScoreRecordDTO:
        return ScoreRecordDTO(
            id=row.score_id,
            user_id=row.user_id,
            quiz_id=row.quiz_id,
            score=row.score,
            total=row.total,
            answers=[AnswerReportDTO(**a) for a in (row.answers or [])],
            created_at=row.created_at,
        )

    @staticmethod
    def list_for_user(user_id: int) -> List[dict]:
        """Score history, newest first, with the quiz title and category."""
        rows = (
            Score.query.filter_by(user_id=user_id)
            .order_by(Score.created_at.desc(), Score.score_id.desc())
            .all()
        )
        history = []
        for row in rows:
            percent = round(100.0 * row.score / row.total, 2) if row.total else 0.0
            history.append({
                'id': row.score_id,
                'quiz_id': row.quiz_id,
                'quiz_title': row.quiz.title if row.quiz else None,
                'category': row.quiz.category if row.quiz else None,
                'score': row.score,
                'total': row.total,
                'percent': percent,
                'answers': list(row.answers or []),
                'created_at': row.created_at.isoformat() if row.created_at else None,
            })
        return history

    @staticmethod
    def delete_for_quiz(quiz_id: int) -> int:
        """Remove every score of a quiz. The caller commits."""
        return Score.query.filter_by(quiz_id=quiz_id).delete(synchronize_session=False)
