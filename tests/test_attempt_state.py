"""
Tests for the attempt state machine.

Covers answer recording, advancing, completion, retake / next transitions,
session serialization and the stale-load guard.
"""

import random
from collections import Counter

import pytest

from quizstack_app.core.error_handlers import ValidationError
from quizstack_app.modules.quiz.engine import (
    AttemptLoader,
    AttemptRestoreError,
    Outcome,
    advance,
    build_answer_reports,
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
from quizstack_app.modules.quiz.exceptions import AttemptStateError

from conftest import question, quiz_dto


@pytest.fixture
def two_question_quiz():
    return quiz_dto([
        question(1, options=('A', 'B'), correct='A', text='Q1'),
        question(2, options=('C', 'D'), correct='D', text='Q2'),
    ])


def _answer_by_text(state, answers_by_text):
    """Answer every question from a ``{question_text: option}`` mapping."""
    while not state.completed:
        option = answers_by_text[current_question(state).question_text]
        state, _ = select_answer(state, option)
        state = advance(state)
    return state


class TestAttemptFlow:

    def test_fresh_attempt_starts_at_first_question(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        assert state.current_index == 0
        assert state.selected_answers == {}
        assert not state.completed
        assert len(state.active_questions) == 2
        assert progress(state) == {'current': 1, 'total': 2, 'answered': 0}

    def test_select_answer_records_and_shows_feedback(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        q = current_question(state)

        new_state, feedback = select_answer(state, q.correct_answer)

        assert new_state.selected_answers == {0: q.correct_answer}
        assert new_state.feedback_visible
        assert feedback.is_correct
        assert feedback.correct_answer == q.correct_answer
        assert current_feedback(new_state) == feedback
        # The input state is left alone.
        assert state.selected_answers == {}
        assert not state.feedback_visible

    def test_first_answer_wins(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        q = current_question(state)
        wrong = next(o for o in q.options if o != q.correct_answer)

        state, first = select_answer(state, wrong)
        again, second = select_answer(state, q.correct_answer)

        assert again.selected_answers[0] == wrong
        assert not second.is_correct
        assert second.selected_answer == wrong
        assert again is state

    def test_unknown_option_rejected(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        with pytest.raises(ValidationError):
            select_answer(state, 'not an option')

    def test_advance_without_answer_rejected(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        assert not has_selected_answer(state)
        with pytest.raises(AttemptStateError):
            advance(state)

    def test_advance_moves_on_and_hides_feedback(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        state, _ = select_answer(state, current_question(state).options[0])

        state = advance(state)

        assert state.current_index == 1
        assert not state.feedback_visible
        assert current_feedback(state) is None
        assert not state.completed

    def test_last_advance_completes_with_score(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        state = _answer_by_text(state, {'Q1': 'A', 'Q2': 'D'})

        assert state.completed
        assert (state.score, state.total) == (2, 2)
        assert not state.feedback_visible

    def test_completed_attempt_rejects_answers(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(1)), {'Q1': 'A', 'Q2': 'D'})
        with pytest.raises(AttemptStateError):
            select_answer(state, 'A')
        with pytest.raises(AttemptStateError):
            advance(state)

    def test_retake_and_next_need_completed_attempt(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(1))
        with pytest.raises(AttemptStateError):
            retake(state, 4)
        with pytest.raises(AttemptStateError):
            start_next(state, two_question_quiz, 20)
        with pytest.raises(AttemptStateError):
            summarize(state)

    def test_end_to_end_example(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(11))
        state = _answer_by_text(state, {'Q1': 'A', 'Q2': 'C'})

        result = summarize(state)
        assert (result.score, result.total) == (1, 2)
        assert result.percent == 50.0
        assert result.outcome is Outcome.FAILED

        again = retake(state, 4, random.Random(12))
        assert len(again.active_questions) == 4
        assert Counter(q.question_text for q in again.active_questions) == {'Q2': 4}
        assert again.current_index == 0
        assert again.selected_answers == {}
        assert again.retake_round == 1

    def test_start_next_discards_previous_attempt(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(1)), {'Q1': 'A', 'Q2': 'D'})
        other = quiz_dto([question(7, options=('x', 'y'), correct='x')], quiz_id=2, title='Other')

        fresh = start_next(state, other, 20, random.Random(2))

        assert fresh.quiz_id == 2
        assert [q.id for q in fresh.active_questions] == [7]
        assert not fresh.completed
        assert fresh.retake_round == 0

    def test_retake_uses_current_questions_but_original_grading(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(5)), {'Q1': 'A', 'Q2': 'C'})
        edited = quiz_dto([
            question(1, options=('A', 'B'), correct='B', text='Q1'),
            question(2, options=('C', 'D', 'E'), correct='E', text='Q2 v2'),
        ])

        again = retake(state, 2, random.Random(6), quiz=edited)

        assert [q.question_text for q in again.active_questions] == ['Q2 v2', 'Q2 v2']
        assert all(sorted(q.options) == ['C', 'D', 'E'] for q in again.active_questions)
        assert all(q.correct_answer == 'E' for q in again.active_questions)

    def test_retake_leaves_out_removed_questions(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(5)), {'Q1': 'B', 'Q2': 'C'})
        trimmed = quiz_dto(two_question_quiz.questions[1:])

        again = retake(state, 3, random.Random(6), quiz=trimmed)

        assert Counter(q.id for q in again.active_questions) == {2: 3}

    def test_retake_fails_when_every_question_was_removed(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(5)), {'Q1': 'B', 'Q2': 'C'})
        replaced = quiz_dto([question(9, options=('x', 'y'), correct='x')])
        with pytest.raises(AttemptRestoreError):
            retake(state, 2, quiz=replaced)


class TestSerialization:

    def test_round_trip_keeps_order_and_answers(self, two_question_quiz):
        state = start_attempt(two_question_quiz, 20, random.Random(3))
        state, _ = select_answer(state, current_question(state).options[1])

        data = serialize_attempt(state, two_question_quiz)
        restored = restore_attempt(data, two_question_quiz)

        assert restored == state
        assert all(isinstance(ref[1][0], int) for ref in data['questions'])
        assert set(data['selected_answers']) == {'0'}

    def test_removed_question_cannot_be_restored(self, two_question_quiz):
        data = serialize_attempt(start_attempt(two_question_quiz, 20, random.Random(3)), two_question_quiz)
        trimmed = quiz_dto(two_question_quiz.questions[:1])
        with pytest.raises(AttemptRestoreError):
            restore_attempt(data, trimmed)

    def test_changed_options_cannot_be_restored(self, two_question_quiz):
        data = serialize_attempt(start_attempt(two_question_quiz, 20, random.Random(3)), two_question_quiz)
        edited = quiz_dto([
            question(1, options=('A', 'B', 'E'), correct='A', text='Q1'),
            two_question_quiz.questions[1],
        ])
        with pytest.raises(AttemptRestoreError):
            restore_attempt(data, edited)

    def test_reworded_option_cannot_be_restored(self, two_question_quiz):
        data = serialize_attempt(start_attempt(two_question_quiz, 20, random.Random(3)), two_question_quiz)
        edited = quiz_dto([
            question(1, options=('A', 'X'), correct='A', text='Q1'),
            two_question_quiz.questions[1],
        ])
        with pytest.raises(AttemptRestoreError):
            restore_attempt(data, edited)

    def test_changed_correct_answer_cannot_be_restored(self, two_question_quiz):
        data = serialize_attempt(start_attempt(two_question_quiz, 20, random.Random(3)), two_question_quiz)
        edited = quiz_dto([
            question(1, options=('A', 'B'), correct='B', text='Q1'),
            two_question_quiz.questions[1],
        ])
        with pytest.raises(AttemptRestoreError):
            restore_attempt(data, edited)

    def test_unknown_reference_format_cannot_be_restored(self, two_question_quiz):
        data = serialize_attempt(start_attempt(two_question_quiz, 20, random.Random(3)), two_question_quiz)
        data['questions'] = [ref[:2] for ref in data['questions']]
        with pytest.raises(AttemptRestoreError):
            restore_attempt(data, two_question_quiz)

    def test_finished_attempt_keeps_its_grading_after_edits(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(3)), {'Q1': 'A', 'Q2': 'D'})
        data = serialize_attempt(state, two_question_quiz)
        edited = quiz_dto([
            question(1, options=('A', 'B'), correct='B', text='Q1'),
            question(2, options=('C', 'D', 'E'), correct='E', text='Q2'),
        ])

        restored = restore_attempt(data, edited)

        assert restored.completed
        assert (restored.score, restored.total) == (2, 2)
        reports = build_answer_reports(restored.active_questions, restored.selected_answers)
        assert [r.is_correct for r in reports] == [True, True]
        assert summarize(restored).outcome is Outcome.PASSED

    def test_finished_attempt_survives_a_removed_question(self, two_question_quiz):
        state = _answer_by_text(start_attempt(two_question_quiz, 20, random.Random(3)), {'Q1': 'A', 'Q2': 'C'})
        data = serialize_attempt(state, two_question_quiz)

        restored = restore_attempt(data, quiz_dto(two_question_quiz.questions[1:]))

        assert (restored.score, restored.total) == (1, 2)
        review = summarize(restored).review
        assert sorted((row['question_id'], row['is_correct']) for row in review) == [(1, True), (2, False)]


class TestAttemptLoader:

    def test_latest_ticket_resolves(self, two_question_quiz):
        loader = AttemptLoader()
        ticket = loader.request(two_question_quiz.id)
        state = loader.resolve(ticket, two_question_quiz, 20, random.Random(1))
        assert state is not None
        assert state.quiz_id == two_question_quiz.id

    def test_superseded_ticket_is_ignored(self, two_question_quiz):
        loader = AttemptLoader()
        stale = loader.request(two_question_quiz.id)
        loader.request(99)
        assert loader.resolve(stale, two_question_quiz, 20) is None

    def test_mismatched_quiz_is_ignored(self, two_question_quiz):
        loader = AttemptLoader()
        ticket = loader.request(99)
        assert loader.resolve(ticket, two_question_quiz, 20) is None

    def test_survives_session_round_trip(self, two_question_quiz):
        loader = AttemptLoader()
        ticket = loader.request(two_question_quiz.id)
        reloaded = AttemptLoader.from_dict(loader.to_dict())
        assert reloaded.is_current(ticket)
