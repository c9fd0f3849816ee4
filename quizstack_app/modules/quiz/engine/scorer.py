# File: quizstack_app/modules/quiz/engine/scorer.py
"""Scoring rules for a finished attempt. Pure logic, no database access."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Sequence, Tuple

from ..schemas import AnswerReportDTO, QuestionDTO

# The pass mark is a fixed policy of 80%; the app may override it via QUIZ_PASS_THRESHOLD.
DEFAULT_PASS_THRESHOLD = 80.0


class Outcome(str, Enum):
    PASSED = 'passed'
    FAILED = 'failed'


def is_answer_correct(question: QuestionDTO, selected_answer) -> bool:
    return selected_answer is not None and selected_answer == question.correct_answer


def compute_score(active_set: Sequence[QuestionDTO], selected_answers: Dict[int, str]) -> Tuple[int, int]:
    """Return ``(score, total)``. Unanswered indices count as incorrect."""
    total = len(active_set)
    score = sum(
        1 for index, question in enumerate(active_set)
        if is_answer_correct(question, selected_answers.get(index))
    )
    return score, total


def compute_percent(score: int, total: int) -> float:
    if total == 0:
        raise ValueError("total must be positive; an active set always has at least one question")
    return 100.0 * score / total


def classify(percent: float, threshold: float = DEFAULT_PASS_THRESHOLD) -> Outcome:
    """Passed at or above ``threshold`` percent."""
    return Outcome.PASSED if percent >= threshold else Outcome.FAILED


def build_answer_reports(active_set: Sequence[QuestionDTO],
                         selected_answers: Dict[int, str]) -> List[AnswerReportDTO]:
    reports = []
    for index, question in enumerate(active_set):
        selected = selected_answers.get(index)
        reports.append(AnswerReportDTO(
            question_id=question.id,
            selected_answer=selected,
            is_correct=is_answer_correct(question, selected),
        ))
    return reports


def build_review(active_set: Sequence[QuestionDTO], selected_answers: Dict[int, str]) -> List[dict]:
    """Per-question rows for the results view."""
    review = []
    for index, question in enumerate(active_set):
        selected = selected_answers.get(index)
        review.append({
            'position': index + 1,
            'question_id': question.id,
            'question_text': question.question_text,
            'selected_answer': selected,
            'correct_answer': question.correct_answer,
            'is_correct': is_answer_correct(question, selected),
            'explanation': question.explanation,
        })
    return review
