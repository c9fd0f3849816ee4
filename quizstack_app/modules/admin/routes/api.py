# File: quizstack_app/modules/admin/routes/api.py
from flask import jsonify, request
from flask_login import current_user

from quizstack_app.core.error_handlers import ValidationError, success_response
from ..decorators import admin_required
from ..services.authoring_service import QuizAuthoringService
from . import blueprint


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError('Request body must be JSON')
    return data


@blueprint.route('/api/quizzes', methods=['POST'])
@admin_required
def create_quiz():
    quiz = QuizAuthoringService.create(_json_body(), current_user)
    return jsonify(success_response(quiz.to_dict(), message='Quiz created')), 201


@blueprint.route('/api/quizzes/<int:quiz_id>', methods=['PUT'])
@admin_required
def append_questions(quiz_id):
    """Append the posted questions to an existing quiz."""
    quiz = QuizAuthoringService.append(quiz_id, _json_body())
    return jsonify(success_response(quiz.to_dict()))


@blueprint.route('/api/quizzes/<int:quiz_id>/questions/<int:question_id>', methods=['PATCH'])
@admin_required
def update_question(quiz_id, question_id):
    # Accepts either the question object or {"json": "<question as text>"}.
    body = _json_body()
    raw = body.get('json') if isinstance(body, dict) and 'json' in body else body
    quiz = QuizAuthoringService.update_question(quiz_id, question_id, raw)
    return jsonify(success_response(quiz.to_dict(), message='Question updated'))


@blueprint.route('/api/quizzes/<int:quiz_id>', methods=['DELETE'])
@admin_required
def delete_quiz(quiz_id):
    QuizAuthoringService.delete(quiz_id, current_user)
    return jsonify(success_response(message='Quiz and related scores deleted successfully'))


@blueprint.route('/api/quizzes/<int:quiz_id>/assign', methods=['PUT'])
@admin_required
def assign_users(quiz_id):
    body = _json_body()
    usernames = body.get('usernames', body.get('authorizedUsers')) if isinstance(body, dict) else None
    quiz = QuizAuthoringService.assign(quiz_id, usernames)
    return jsonify(success_response(quiz.to_dict()))


@blueprint.route('/api/users', methods=['GET'])
@admin_required
def list_users():
    return jsonify(success_response({'users': QuizAuthoringService.list_users()}))


@blueprint.route('/api/init-quizzes', methods=['POST'])
@admin_required
def init_quizzes():
    """Replace every quiz with the sample set."""
    created = QuizAuthoringService.seed_sample_quizzes(current_user, replace_existing=True)
    return jsonify(success_response(
        {'quizzes': [q.to_dict() for q in created]},
        message=f'{len(created)} quizzes added',
    ))
