# File: quizstack_app/modules/quiz/engine/deriver.py
"""
Question-set derivation.

Builds the ordered list of questions an attempt actually presents:
a shuffled, capped draw for a fresh attempt, or a replicated draw of the
missed questions for a retake. Only the order of questions and of each
question's options is changed; ``correct_answer`` keeps its value.

Randomness comes from an optional ``random.Random``. Production calls pass
nothing and get a fresh unseeded generator per derivation.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from quizstack_app.core.error_handlers import ValidationError
from ..schemas import QuestionDTO

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2


def ensure_valid_question(question: QuestionDTO) -> QuestionDTO:
    """Reject a question that cannot be graded before it enters an active set."""
    options = list(question.options or [])
    if len(options) < MIN_OPTIONS:
        raise ValidationError(
            f"Question {question.id} needs at least {MIN_OPTIONS} options",
            errors={'question_id': question.id, 'options': 'too_few'},
        )
    if question.correct_answer not in options:
        raise ValidationError(
            f"Question {question.id}: correct answer must match one of the options",
            errors={'question_id': question.id, 'correct_answer': 'not_in_options'},
        )
    return question


def shuffle_options(question: QuestionDTO, rng: random.Random) -> QuestionDTO:
    """Return a copy of ``question`` with its options in a fresh random order."""
    options = list(question.options)
    rng.shuffle(options)
    return replace(question, options=options)


def derive_initial(questions: Sequence[QuestionDTO], cap: int,
                   rng: Optional[random.Random] = None) -> List[QuestionDTO]:
    """
    Draw the active set for a fresh attempt.

    Returns ``min(len(questions), cap)`` distinct questions in random order,
    each with independently shuffled options.
    """
    if not questions:
        raise ValidationError('A quiz needs at least one question')
    if cap < 1:
        raise ValueError(f"cap must be at least 1, got {cap}")

    rng = rng or random.Random()
    for question in questions:
        ensure_valid_question(question)

    pool = list(questions)
    rng.shuffle(pool)
    active = [shuffle_options(q, rng) for q in pool[:cap]]
    logger.debug("Derived initial set: %d of %d questions (cap=%d)", len(active), len(questions), cap)
    return active


def split_failed(previous_set: Sequence[QuestionDTO],
                 selected_answers: Dict[int, str]) -> List[QuestionDTO]:
    """Questions whose recorded answer is missing or wrong, one per question id."""
    failed = []
    seen = set()
    for index, question in enumerate(previous_set):
        if selected_answers.get(index) == question.correct_answer:
            continue
        if question.id in seen:
            continue
        seen.add(question.id)
        failed.append(question)
    return failed


def _unique_by_id(questions: Sequence[QuestionDTO]) -> List[QuestionDTO]:
    unique = []
    seen = set()
    for question in questions:
        if question.id not in seen:
            seen.add(question.id)
            unique.append(question)
    return unique


def derive_retake(previous_set: Sequence[QuestionDTO], selected_answers: Dict[int, str],
                  repeat_factor: int, rng: Optional[random.Random] = None) -> List[QuestionDTO]:
    """
    Draw the active set for a retake.

    The pool is the failed questions, or the whole previous set when nothing
    was failed. Each pooled question appears ``repeat_factor`` times, every
    copy with its own option order, and the result is shuffled once more.
    """
    if not previous_set:
        raise ValidationError('Nothing to retake: the previous attempt had no questions')
    if repeat_factor < 1:
        raise ValueError(f"repeat_factor must be at least 1, got {repeat_factor}")

    rng = rng or random.Random()
    failed = split_failed(previous_set, selected_answers)
    # A perfect score still retakes everything.
    pool = failed if failed else _unique_by_id(previous_set)
    for question in pool:
        ensure_valid_question(question)

    rng.shuffle(pool)
    replicated = [shuffle_options(q, rng) for q in pool for _ in range(repeat_factor)]
    rng.shuffle(replicated)
    logger.debug(
        "Derived retake set: %d questions x %d = %d items (failed=%d)",
        len(pool), repeat_factor, len(replicated), len(failed),
    )
    return replicated
