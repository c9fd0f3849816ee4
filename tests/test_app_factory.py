import json
import logging

from quizstack_app import create_app
from quizstack_app.core.logging_config import JsonFormatter
from quizstack_app.core.module_registry import DEFAULT_MODULES
from quizstack_app.modules.quiz.config import QuizSessionConfig, get_quiz_setting

from conftest import TestConfig


def test_blueprints_registered(app):
    for module in DEFAULT_MODULES:
        assert module.load_blueprint().name in app.blueprints


def test_logger_configured(app):
    logger = logging.getLogger('quizstack_app')
    assert logger.handlers
    assert app.logger is logger


def test_quiz_settings_prefer_app_config(app):
    app.config['QUIZ_RETAKE_REPEAT_FACTOR'] = '2'
    assert get_quiz_setting('QUIZ_RETAKE_REPEAT_FACTOR') == 2
    assert get_quiz_setting('QUIZ_PASS_THRESHOLD') == 80.0


def test_quiz_settings_outside_app_context():
    assert get_quiz_setting('QUIZ_QUESTION_CAP') == QuizSessionConfig.QUIZ_QUESTION_CAP


def test_sample_quizzes_seeded_on_empty_database():
    class SeedConfig(TestConfig):
        SEED_SAMPLE_QUIZZES = True

    app = create_app(SeedConfig)
    with app.app_context():
        from quizstack_app.models import Quiz, db

        titles = sorted(q.title for q in Quiz.query.all())
        db.session.remove()
        db.drop_all()
    assert titles == ['JavaScript Basics', 'Node.js Fundamentals']


def test_json_log_lines_escape_quotes():
    formatter = JsonFormatter()
    record = logging.LogRecord('quizstack_app', logging.INFO, __file__, 1, 'quiz "%s" started', ('Basics',), None)

    entry = json.loads(formatter.format(record))

    assert entry['level'] == 'INFO'
    assert entry['message'] == 'quiz "Basics" started'


def test_wrong_method_returns_json(client):
    response = client.delete('/auth/api/csrf-token')
    assert response.status_code == 405
    body = response.get_json()
    assert body['success'] is False
    assert body['code'] == 'METHOD_NOT_ALLOWED'


def test_missing_csrf_token_returns_json():
    class CSRFConfig(TestConfig):
        WTF_CSRF_ENABLED = True

    app = create_app(CSRFConfig)
    with app.app_context():
        from quizstack_app.models import db

        response = app.test_client().post('/auth/api/login', json={'username': 'admin', 'password': 'admin123'})
        db.session.remove()
        db.drop_all()

    assert response.status_code == 400
    assert response.get_json()['code'] == 'CSRF_FAILED'
