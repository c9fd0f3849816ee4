from flask import jsonify
from flask_login import current_user, login_required

from quizstack_app.core.error_handlers import success_response
from ..services.score_repository import ScoreRepository
from . import blueprint


@blueprint.route('/api/', methods=['GET'])
@login_required
def list_scores():
    """Score history of the current user, newest first."""
    history = ScoreRepository.list_for_user(current_user.user_id)
    return jsonify(success_response({'scores': history}))
