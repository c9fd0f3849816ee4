# File: quizstack_app/modules/quiz/engine/attempt.py
"""
Attempt state machine
=====================
One learner's pass through a derived question set.

Lifecycle::

    state = start_attempt(quiz, cap)
    while not state.completed:
        state, feedback = select_answer(state, option)
        state = advance(state)
    state = retake(state, repeat_factor)      # or start_next(state, other_quiz, cap)

Every transition takes an ``AttemptState`` and returns a new one; the
argument is left untouched. Nothing here touches the database or the
request, so callers decide where the state lives between steps.
"""

from __future__ import annotations

import hashlib
import json
import random
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from quizstack_app.core.error_handlers import ValidationError
from ..exceptions import AttemptStateError
from ..schemas import QuestionDTO, QuizDTO
from .deriver import derive_initial, derive_retake
from .scorer import (
    DEFAULT_PASS_THRESHOLD,
    Outcome,
    build_review,
    classify,
    compute_percent,
    compute_score,
)


# ── Data Transfer Objects ────────────────────────────────────────────


@dataclass
class AttemptState:
    quiz_id: int
    quiz_title: str
    active_questions: List[QuestionDTO]
    current_index: int = 0
    selected_answers: Dict[int, str] = field(default_factory=dict)
    feedback_visible: bool = False
    last_answer_correct: Optional[bool] = None
    completed: bool = False
    score: Optional[int] = None
    total: Optional[int] = None
    retake_round: int = 0

    @property
    def status(self) -> str:
        return 'completed' if self.completed else 'in_progress'

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.active_questions) - 1


@dataclass(frozen=True)
class Feedback:
    """Shown right after an answer, until the learner advances."""

    is_correct: bool
    selected_answer: str
    correct_answer: str
    explanation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_correct': self.is_correct,
            'selected_answer': self.selected_answer,
            'correct_answer': self.correct_answer,
            'explanation': self.explanation,
        }


@dataclass(frozen=True)
class AttemptResult:
    score: int
    total: int
    percent: float
    outcome: Outcome
    review: List[dict] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'total': self.total,
            'percent': round(self.percent, 2),
            'outcome': self.outcome.value,
            'passed': self.outcome is Outcome.PASSED,
            'review': self.review,
        }


# ── Read helpers ─────────────────────────────────────────────────────


def current_question(state: AttemptState) -> QuestionDTO:
    return state.active_questions[state.current_index]


def has_selected_answer(state: AttemptState) -> bool:
    return state.current_index in state.selected_answers


def progress(state: AttemptState) -> Dict[str, int]:
    return {
        'current': state.current_index + 1,
        'total': len(state.active_questions),
        'answered': len(state.selected_answers),
    }


def current_feedback(state: AttemptState) -> Optional[Feedback]:
    """Feedback for the current question, or ``None`` once it has been hidden."""
    if state.completed or not state.feedback_visible or not has_selected_answer(state):
        return None
    return _feedback_for(current_question(state), state.selected_answers[state.current_index])


def summarize(state: AttemptState, threshold: float = DEFAULT_PASS_THRESHOLD) -> AttemptResult:
    if not state.completed:
        raise AttemptStateError('The attempt is not finished yet', action='summarize')
    score, total = state.score, state.total
    percent = compute_percent(score, total)
    return AttemptResult(
        score=score,
        total=total,
        percent=percent,
        outcome=classify(percent, threshold),
        review=build_review(state.active_questions, state.selected_answers),
    )


def _feedback_for(question: QuestionDTO, option: str) -> Feedback:
    return Feedback(
        is_correct=option == question.correct_answer,
        selected_answer=option,
        correct_answer=question.correct_answer,
        explanation=question.explanation,
    )


# ── Transitions ──────────────────────────────────────────────────────


def start_attempt(quiz: QuizDTO, cap: int, rng: Optional[random.Random] = None) -> AttemptState:
    """``InProgress(0, {})`` over a freshly derived question set."""
    return AttemptState(
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        active_questions=derive_initial(quiz.questions, cap, rng),
    )


def select_answer(state: AttemptState, option: str) -> Tuple[AttemptState, Feedback]:
    """
    Record ``option`` for the current question and return its feedback.

    The first answer for an index wins: calling again on an answered index
    returns the state unchanged, with the feedback of the recorded answer.
    """
    if state.completed:
        raise AttemptStateError('The attempt is already finished', action='select_answer')

    question = current_question(state)
    if has_selected_answer(state):
        return state, _feedback_for(question, state.selected_answers[state.current_index])

    if option not in question.options:
        raise ValidationError(
            'The selected option is not one of the choices for this question',
            errors={'option': option},
        )

    answers = dict(state.selected_answers)
    answers[state.current_index] = option
    feedback = _feedback_for(question, option)
    new_state = replace(
        state,
        selected_answers=answers,
        feedback_visible=True,
        last_answer_correct=feedback.is_correct,
    )
    return new_state, feedback


def advance(state: AttemptState) -> AttemptState:
    """Move to the next question, or finish and score on the last one."""
    if state.completed:
        raise AttemptStateError('The attempt is already finished', action='advance')
    if not has_selected_answer(state):
        raise AttemptStateError('Select an answer before moving on', action='advance')

    if state.is_last:
        score, total = compute_score(state.active_questions, state.selected_answers)
        return replace(state, completed=True, score=score, total=total, feedback_visible=False)

    return replace(
        state,
        current_index=state.current_index + 1,
        feedback_visible=False,
        last_answer_correct=None,
    )


def retake(state: AttemptState, repeat_factor: int, rng: Optional[random.Random] = None,
           quiz: Optional[QuizDTO] = None) -> AttemptState:
    """
    Start over on the missed questions (or all of them after a perfect score).

    With ``quiz``, the retake uses that quiz's current version of each
    question. Which questions were missed is still decided by the finished
    attempt's own grading; questions since removed from the quiz are left out.
    """
    if not state.completed:
        raise AttemptStateError('Finish the attempt before retaking it', action='retake')
    if quiz is None:
        previous, answers = state.active_questions, state.selected_answers
    else:
        previous, answers = _rebase_on(state, quiz)
    return AttemptState(
        quiz_id=state.quiz_id,
        quiz_title=state.quiz_title,
        active_questions=derive_retake(previous, answers, repeat_factor, rng),
        retake_round=state.retake_round + 1,
    )


def _rebase_on(state: AttemptState, quiz: QuizDTO) -> Tuple[List[QuestionDTO], Dict[int, str]]:
    questions, answers = [], {}
    for index, question in enumerate(state.active_questions):
        canonical = quiz.question_by_id(question.id)
        if canonical is None:
            continue
        if state.selected_answers.get(index) == question.correct_answer:
            answers[len(questions)] = canonical.correct_answer
        questions.append(canonical)
    if not questions:
        raise AttemptRestoreError(f"every question of the attempt was removed from quiz {quiz.id}")
    return questions, answers


def start_next(state: AttemptState, quiz: QuizDTO, cap: int,
               rng: Optional[random.Random] = None) -> AttemptState:
    """Discard a finished attempt and start on ``quiz``."""
    if not state.completed:
        raise AttemptStateError('Finish the attempt before moving to another quiz', action='start_next')
    return start_attempt(quiz, cap, rng)


# ── Session storage ──────────────────────────────────────────────────


class AttemptRestoreError(Exception):
    """The stored attempt no longer matches the quiz it was derived from."""


def _options_digest(options: List[str]) -> str:
    return hashlib.sha1(json.dumps(list(options)).encode('utf-8')).hexdigest()[:12]


def serialize_attempt(state: AttemptState, quiz: QuizDTO) -> Dict[str, Any]:
    """
    Compact, JSON-safe form for the Flask session.

    Each question is stored as ``[question_id, option_order, correct_answer,
    options_digest]``. The order indexes into the question's options in
    ``quiz``; the answer key and digest record what the attempt was built on.
    """
    return {
        'quiz_id': state.quiz_id,
        'quiz_title': state.quiz_title,
        'questions': _compact_refs(state, quiz),
        'current_index': state.current_index,
        'selected_answers': {str(k): v for k, v in state.selected_answers.items()},
        'feedback_visible': state.feedback_visible,
        'last_answer_correct': state.last_answer_correct,
        'completed': state.completed,
        'score': state.score,
        'total': state.total,
        'retake_round': state.retake_round,
    }


def _compact_refs(state: AttemptState, quiz: QuizDTO) -> List[List[Any]]:
    refs = []
    for question in state.active_questions:
        canonical = quiz.question_by_id(question.id)
        if canonical is None or sorted(canonical.options) != sorted(question.options):
            raise AttemptRestoreError(f"question {question.id} does not match quiz {quiz.id}")
        refs.append([
            question.id,
            [canonical.options.index(opt) for opt in question.options],
            question.correct_answer,
            _options_digest(canonical.options),
        ])
    return refs


def _options_match(canonical: QuestionDTO, order, digest: str) -> bool:
    return digest == _options_digest(canonical.options) and sorted(order) == list(range(len(canonical.options)))


def _stale_reason(canonical: Optional[QuestionDTO], order, correct_answer: str,
                  digest: str) -> Optional[str]:
    if canonical is None:
        return 'was removed'
    if not _options_match(canonical, order, digest):
        return 'had its options changed'
    if canonical.correct_answer != correct_answer:
        return 'had its correct answer changed'
    return None


def _frozen_question(question_id: int, canonical: Optional[QuestionDTO], order,
                     correct_answer: str, digest: str) -> QuestionDTO:
    """A finished attempt keeps the answer key it was graded with."""
    if canonical is None:
        return QuestionDTO(id=question_id, question_text='', options=[], correct_answer=correct_answer)
    if _options_match(canonical, order, digest):
        options = [canonical.options[i] for i in order]
    else:
        options = list(canonical.options)
    return replace(canonical, options=options, correct_answer=correct_answer)


def restore_attempt(data: Dict[str, Any], quiz: QuizDTO) -> AttemptState:
    """
    Rebuild an attempt stored by ``serialize_attempt`` against the current quiz.

    An unfinished attempt must still match the quiz exactly. A finished one
    is restored even after the quiz was edited: its questions keep the
    stored answer key, so the score and its review stay as they were graded.
    """
    if data.get('quiz_id') != quiz.id:
        raise AttemptRestoreError('stored attempt belongs to another quiz')
    completed = bool(data.get('completed'))

    active = []
    for ref in data.get('questions') or []:
        try:
            question_id, order, correct_answer, digest = ref
        except (TypeError, ValueError):
            raise AttemptRestoreError('stored question reference has an unknown format') from None
        canonical = quiz.question_by_id(question_id)
        reason = _stale_reason(canonical, order, correct_answer, digest)
        if reason is None:
            active.append(replace(canonical, options=[canonical.options[i] for i in order]))
        elif completed:
            active.append(_frozen_question(question_id, canonical, order, correct_answer, digest))
        else:
            raise AttemptRestoreError(f"question {question_id} {reason}")
    if not active:
        raise AttemptRestoreError('stored attempt has no questions')

    index = int(data.get('current_index', 0))
    if not 0 <= index < len(active):
        raise AttemptRestoreError('stored question index is out of range')

    return AttemptState(
        quiz_id=quiz.id,
        quiz_title=data.get('quiz_title') or quiz.title,
        active_questions=active,
        current_index=index,
        selected_answers={int(k): v for k, v in (data.get('selected_answers') or {}).items()},
        feedback_visible=bool(data.get('feedback_visible')),
        last_answer_correct=data.get('last_answer_correct'),
        completed=completed,
        score=data.get('score'),
        total=data.get('total'),
        retake_round=int(data.get('retake_round', 0)),
    )


# ── Stale-response guard ─────────────────────────────────────────────


@dataclass(frozen=True)
class LoadTicket:
    serial: int
    quiz_id: int


class AttemptLoader:
    """
    Tracks which quiz load is current so a superseded fetch is ignored.

    ``request`` issues a ticket before the quiz is fetched; ``resolve``
    starts the attempt only if that ticket is still the latest one and the
    fetched quiz is the one it asked for.
    """

    def __init__(self, serial: int = 0, pending_quiz_id: Optional[int] = None):
        self.serial = serial
        self.pending_quiz_id = pending_quiz_id

    def request(self, quiz_id: int) -> LoadTicket:
        self.serial += 1
        self.pending_quiz_id = quiz_id
        return LoadTicket(serial=self.serial, quiz_id=quiz_id)

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.serial == self.serial and ticket.quiz_id == self.pending_quiz_id

    def resolve(self, ticket: LoadTicket, quiz: QuizDTO, cap: int,
                rng: Optional[random.Random] = None) -> Optional[AttemptState]:
        if not self.is_current(ticket) or quiz.id != ticket.quiz_id:
            return None
        self.pending_quiz_id = None
        return start_attempt(quiz, cap, rng)

    def to_dict(self) -> Dict[str, Any]:
        return {'serial': self.serial, 'pending_quiz_id': self.pending_quiz_id}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AttemptLoader':
        data = data or {}
        return cls(serial=int(data.get('serial', 0)), pending_quiz_id=data.get('pending_quiz_id'))
