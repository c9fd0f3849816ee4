# File: quizstack_app/modules/quiz/services/submission.py
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from quizstack_app.core.signals import score_submitted
from quizstack_app.modules.scores.interface import save_score
from ..engine import AttemptState, build_answer_reports
from ..exceptions import AttemptStateError, SubmissionError
from ..schemas import ScoreRecordDTO


class SubmissionCoordinator:
    """Turns a completed attempt into a stored score record."""

    @staticmethod
    def build_record(state: AttemptState, user) -> ScoreRecordDTO:
        if not state.completed:
            raise AttemptStateError('Only a finished attempt can be submitted', action='submit')
        return ScoreRecordDTO(
            user_id=user.user_id,
            quiz_id=state.quiz_id,
            score=state.score,
            total=state.total,
            answers=build_answer_reports(state.active_questions, state.selected_answers),
        )

    @classmethod
    def submit(cls, state: AttemptState, user) -> ScoreRecordDTO:
        """
        Store the score of ``state``.

        The attempt itself is not touched, so after a ``SubmissionError`` the
        caller still holds the completed attempt and may submit again.
        Repeated submissions each create a new record.
        """
        record = cls.build_record(state, user)
        try:
            stored = save_score(record, user)
        except SQLAlchemyError as exc:
            raise SubmissionError() from exc

        current_app.logger.info(
            "Score %s/%s stored for user %s on quiz %s", stored.score, stored.total, user.user_id, stored.quiz_id
        )
        score_submitted.send(
            current_app._get_current_object(),
            user_id=user.user_id,
            quiz_id=stored.quiz_id,
            score_id=stored.id,
            score=stored.score,
            total=stored.total,
        )
        return stored
