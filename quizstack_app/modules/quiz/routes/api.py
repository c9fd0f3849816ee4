# File: quizstack_app/modules/quiz/routes/api.py
from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from quizstack_app.core.error_handlers import ValidationError, success_response
from ..services.repository import QuizRepository
from ..services.session_service import QuizSessionService
from ..services.submission import SubmissionCoordinator
from . import blueprint


def _attempt_response(state, restarted=False, status=200, **extra):
    data = QuizSessionService.build_payload(state, current_user, restarted=restarted)
    data.update(extra)
    return jsonify(success_response(data)), status


@blueprint.route('/api/quizzes', methods=['GET'])
@login_required
def list_quizzes():
    quizzes = QuizRepository.fetch_quiz_list(current_user)
    return jsonify(success_response({'quizzes': [q.to_dict() for q in quizzes]}))


@blueprint.route('/api/quizzes/<int:quiz_id>', methods=['GET'])
@login_required
def get_quiz(quiz_id):
    """Quiz details without correct answers."""
    quiz = QuizRepository.fetch_quiz(quiz_id, current_user)
    data = quiz.to_public_dict()
    data['questions'] = [q.to_public_dict() for q in quiz.questions]
    return jsonify(success_response(data))


@blueprint.route('/api/quizzes/<int:quiz_id>/attempt', methods=['POST'])
@login_required
def start_attempt(quiz_id):
    state, _ = QuizSessionService.start(quiz_id, current_user)
    return _attempt_response(state, status=201)


@blueprint.route('/api/attempt', methods=['GET'])
@login_required
def get_attempt():
    state, _, restarted = QuizSessionService.load(current_user)
    return _attempt_response(state, restarted=restarted)


@blueprint.route('/api/attempt', methods=['DELETE'])
@login_required
def abandon_attempt():
    removed = QuizSessionService.abandon()
    return jsonify(success_response({'abandoned': removed}))


@blueprint.route('/api/attempt/answer', methods=['POST'])
@login_required
def answer():
    data = request.get_json(silent=True) or {}
    option = data.get('option')
    if not isinstance(option, str):
        raise ValidationError('An option is required', errors={'option': 'required'})

    state, feedback = QuizSessionService.answer(current_user, option)
    return _attempt_response(state, feedback=feedback.to_dict())


@blueprint.route('/api/attempt/advance', methods=['POST'])
@login_required
def advance():
    state = QuizSessionService.advance(current_user)
    return _attempt_response(state)


@blueprint.route('/api/attempt/retake', methods=['POST'])
@login_required
def retake():
    state, restarted = QuizSessionService.retake(current_user)
    return _attempt_response(state, restarted=restarted)


@blueprint.route('/api/attempt/next', methods=['POST'])
@login_required
def next_quiz():
    state, _ = QuizSessionService.start_next(current_user)
    return _attempt_response(state, status=201)


@blueprint.route('/api/attempt/submit', methods=['POST'])
@login_required
def submit():
    state, _, _ = QuizSessionService.load(current_user)
    record = SubmissionCoordinator.submit(state, current_user)
    current_app.logger.debug("Submission %s accepted", record.id)
    return _attempt_response(state, status=201, score_record=record.to_dict())
