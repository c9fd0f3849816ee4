# File: quizstack_app/modules/quiz/services/session_service.py
"""
Keeps the learner's attempt in the Flask session between requests.

Only a compact form is stored (question ids, option order and the answer key
each question was graded with); the quiz is fetched again on every request
and the attempt is rebuilt against it. An unfinished attempt whose quiz
changed underneath it is replaced by a freshly derived one. A finished
attempt keeps its grading, so it can still be reviewed and submitted.
"""

import random
from typing import Optional, Tuple

from flask import current_app, session

from quizstack_app.core.error_handlers import NotFoundError
from quizstack_app.core.signals import attempt_completed
from ..config import QuizSessionConfig, get_quiz_setting
from ..engine import (
    AttemptRestoreError,
    AttemptState,
    Feedback,
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
from ..exceptions import AttemptStateError, NoActiveAttemptError
from ..logics.navigation import suggest_next_quiz
from ..schemas import QuizDTO
from .repository import QuizRepository


class QuizSessionService:
    """Start, step through and finish quiz attempts for the current user."""

    rng_factory = random.Random

    # --- Storage -------------------------------------------------------

    @staticmethod
    def _store(state: AttemptState, quiz: QuizDTO) -> None:
        session[QuizSessionConfig.SESSION_KEY] = serialize_attempt(state, quiz)

    @staticmethod
    def _stored() -> Optional[dict]:
        return session.get(QuizSessionConfig.SESSION_KEY)

    @classmethod
    def load(cls, user) -> Tuple[AttemptState, QuizDTO, bool]:
        """
        Return ``(state, quiz, restarted)`` for the attempt in the session.

        ``restarted`` is True when the stored attempt no longer matched the
        quiz and a new one was derived in its place.
        """
        data = cls._stored()
        if not data:
            raise NoActiveAttemptError()

        quiz = QuizRepository.fetch_quiz(data.get('quiz_id'), user)
        try:
            return restore_attempt(data, quiz), quiz, False
        except AttemptRestoreError as exc:
            current_app.logger.info(
                "Stored attempt for quiz %s could not be restored (%s); starting over", quiz.id, exc
            )
            state = cls._derive(quiz)
            cls._store(state, quiz)
            return state, quiz, True

    @classmethod
    def _derive(cls, quiz: QuizDTO) -> AttemptState:
        return start_attempt(quiz, get_quiz_setting('QUIZ_QUESTION_CAP'), cls.rng_factory())

    # --- Transitions ---------------------------------------------------

    @classmethod
    def start(cls, quiz_id: int, user) -> Tuple[AttemptState, QuizDTO]:
        """Fetch the quiz and start a fresh attempt; a failed fetch leaves the session as it was."""
        quiz = QuizRepository.fetch_quiz(quiz_id, user)
        state = cls._derive(quiz)
        cls._store(state, quiz)
        current_app.logger.info(
            "User %s started quiz %s with %d questions", user.user_id, quiz.id, len(state.active_questions)
        )
        return state, quiz

    @classmethod
    def answer(cls, user, option: str) -> Tuple[AttemptState, Feedback]:
        state, quiz, _ = cls.load(user)
        state, feedback = select_answer(state, option)
        cls._store(state, quiz)
        return state, feedback

    @classmethod
    def advance(cls, user) -> AttemptState:
        state, quiz, _ = cls.load(user)
        state = advance(state)
        cls._store(state, quiz)
        if state.completed:
            result = summarize(state, get_quiz_setting('QUIZ_PASS_THRESHOLD'))
            attempt_completed.send(
                current_app._get_current_object(),
                user_id=user.user_id,
                quiz_id=state.quiz_id,
                score=result.score,
                total=result.total,
                percent=result.percent,
                outcome=result.outcome.value,
            )
        return state

    @classmethod
    def retake(cls, user) -> Tuple[AttemptState, bool]:
        """Retake the finished attempt; returns ``(state, restarted)``."""
        state, quiz, _ = cls.load(user)
        try:
            state = retake(state, get_quiz_setting('QUIZ_RETAKE_REPEAT_FACTOR'), cls.rng_factory(), quiz=quiz)
            restarted = False
        except AttemptRestoreError as exc:
            current_app.logger.info("Retake of quiz %s not possible (%s); starting over", quiz.id, exc)
            state = cls._derive(quiz)
            restarted = True
        cls._store(state, quiz)
        return state, restarted

    @classmethod
    def start_next(cls, user) -> Tuple[AttemptState, QuizDTO]:
        state, _, _ = cls.load(user)
        if not state.completed:
            raise AttemptStateError('Finish the attempt before moving to another quiz', action='start_next')

        suggestion = suggest_next_quiz(QuizRepository.fetch_quiz_list(user), state.quiz_id)
        if suggestion is None:
            raise NotFoundError('There is no next quiz', resource='quiz')

        next_quiz = QuizRepository.fetch_quiz(suggestion.id, user)
        state = start_next(state, next_quiz, get_quiz_setting('QUIZ_QUESTION_CAP'), cls.rng_factory())
        cls._store(state, next_quiz)
        return state, next_quiz

    @staticmethod
    def abandon() -> bool:
        return session.pop(QuizSessionConfig.SESSION_KEY, None) is not None

    @classmethod
    def refresh_quiz(cls, quiz: QuizDTO) -> bool:
        """Re-derive the session's unfinished attempt on ``quiz``, which was just edited."""
        data = cls._stored()
        if not data or data.get('quiz_id') != quiz.id or data.get('completed'):
            return False
        cls._store(cls._derive(quiz), quiz)
        current_app.logger.info("Attempt on quiz %s re-derived after a question edit", quiz.id)
        return True

    # --- Presentation --------------------------------------------------

    @staticmethod
    def build_payload(state: AttemptState, user=None, restarted: bool = False) -> dict:
        payload = {
            'quiz_id': state.quiz_id,
            'quiz_title': state.quiz_title,
            'status': state.status,
            'retake_round': state.retake_round,
            'progress': progress(state),
            'restarted': restarted,
        }
        if state.completed:
            result = summarize(state, get_quiz_setting('QUIZ_PASS_THRESHOLD'))
            payload['result'] = result.to_dict()
            if user is not None:
                suggestion = suggest_next_quiz(QuizRepository.fetch_quiz_list(user), state.quiz_id)
                payload['next_quiz'] = suggestion.to_dict() if suggestion else None
            return payload

        feedback = current_feedback(state)
        payload['question'] = current_question(state).to_public_dict()
        payload['has_answer'] = has_selected_answer(state)
        payload['selected_answer'] = state.selected_answers.get(state.current_index)
        payload['feedback'] = feedback.to_dict() if feedback else None
        payload['is_last'] = state.is_last
        return payload
