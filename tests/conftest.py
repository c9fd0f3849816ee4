import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quizstack_app import create_app, db
from quizstack_app.config import Config
from quizstack_app.models import Quiz, QuizQuestion, User
from quizstack_app.modules.quiz.schemas import QuestionDTO, QuizDTO


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    LOG_DIR = ''
    SEED_SAMPLE_QUIZZES = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_user(app):
    return User.query.filter_by(username=TestConfig.DEFAULT_ADMIN_USERNAME).first()


@pytest.fixture
def learner(app):
    user = User(username='learner', user_role=User.ROLE_USER)
    user.set_password('secret123')
    db.session.add(user)
    db.session.commit()
    return user


def login(client, user):
    """Log ``user`` in through the Flask-Login session cookie."""
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.user_id)
        sess['_fresh'] = True


def make_quiz(title='Two Questions', category='Testing', questions=None, authorized=None, creator=None):
    """Insert a quiz; ``questions`` is a list of (text, options, correct) tuples."""
    if questions is None:
        questions = [
            ('Q1', ['A', 'B'], 'A'),
            ('Q2', ['C', 'D'], 'D'),
        ]
    quiz = Quiz(
        title=title,
        category=category,
        authorized_users=list(authorized or []),
        created_by=creator.user_id if creator else None,
    )
    quiz.questions = [
        QuizQuestion(position=i, question_text=text, options=list(options), correct_answer=correct)
        for i, (text, options, correct) in enumerate(questions)
    ]
    db.session.add(quiz)
    db.session.commit()
    return quiz


def question(qid, options=('A', 'B', 'C', 'D'), correct='A', text=None):
    return QuestionDTO(
        id=qid,
        question_text=text or f'Question {qid}',
        options=list(options),
        correct_answer=correct,
    )


def quiz_dto(questions, quiz_id=1, title='Sample'):
    return QuizDTO(id=quiz_id, title=title, category='Testing', questions=list(questions))
