"""
Tests for the admin authoring API.

Covers quiz creation, appending and editing questions, assignment,
deletion with score cleanup and the sample data reset.
"""

import json

import pytest

from quizstack_app.core.signals import quiz_created
from quizstack_app.models import Quiz, QuizQuestion, Score, db
from quizstack_app.modules.quiz.config import QuizSessionConfig

from conftest import login, make_quiz

NEW_QUIZ = {
    'title': 'Python Basics',
    'category': 'Python',
    'description': 'Warm-up',
    'questions': [
        {'questionText': 'len([1, 2])?', 'options': ['1', '2'], 'correctAnswer': '2'},
        {'questionText': 'Type of 1.0?', 'options': ['int', 'float'], 'correctAnswer': 'float',
         'explanation': 'Literals with a dot are floats.'},
    ],
}


@pytest.fixture
def admin_client(client, admin_user):
    login(client, admin_user)
    return client


def test_non_admin_is_forbidden(client, learner):
    login(client, learner)
    response = client.post('/admin/api/quizzes', json=NEW_QUIZ)
    assert response.status_code == 403
    assert response.get_json()['code'] == 'UNAUTHORIZED'


def test_anonymous_is_unauthenticated(client):
    assert client.get('/admin/api/users').status_code == 401


def test_create_quiz(admin_client, admin_user):
    created = []

    def listener(sender, **kwargs):
        created.append(kwargs)

    with quiz_created.connected_to(listener):
        response = admin_client.post('/admin/api/quizzes', json=NEW_QUIZ)

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['title'] == 'Python Basics'
    assert [q['question_text'] for q in data['questions']] == ['len([1, 2])?', 'Type of 1.0?']
    assert data['created_by'] == admin_user.user_id
    assert created[0]['question_count'] == 2


def test_create_quiz_rejects_bad_question(admin_client):
    bad = dict(NEW_QUIZ, questions=[{'questionText': 'x', 'options': ['a', 'b'], 'correctAnswer': 'c'}])
    response = admin_client.post('/admin/api/quizzes', json=bad)
    assert response.status_code == 400
    assert Quiz.query.count() == 0


def test_append_questions(admin_client):
    quiz = make_quiz()
    response = admin_client.put(f'/admin/api/quizzes/{quiz.quiz_id}', json={'questions': NEW_QUIZ['questions']})
    assert response.status_code == 200
    positions = [q.position for q in QuizQuestion.query.filter_by(quiz_id=quiz.quiz_id).order_by(QuizQuestion.position)]
    assert positions == [0, 1, 2, 3]


def test_append_requires_questions(admin_client):
    quiz = make_quiz()
    assert admin_client.put(f'/admin/api/quizzes/{quiz.quiz_id}', json={'questions': []}).status_code == 400


def test_update_question_from_json_text(admin_client):
    quiz = make_quiz()
    target = quiz.questions[0]
    patch = {'questionText': 'Q1 edited', 'options': ['A', 'B', 'E'], 'correctAnswer': 'E'}

    response = admin_client.patch(
        f'/admin/api/quizzes/{quiz.quiz_id}/questions/{target.question_id}',
        json={'json': json.dumps(patch)},
    )

    assert response.status_code == 200
    db.session.refresh(target)
    assert target.question_text == 'Q1 edited'
    assert target.options == ['A', 'B', 'E']
    assert target.correct_answer == 'E'


def test_update_question_rejects_invalid_patch(admin_client):
    quiz = make_quiz()
    target = quiz.questions[0]
    response = admin_client.patch(
        f'/admin/api/quizzes/{quiz.quiz_id}/questions/{target.question_id}',
        json={'json': '{"questionText": "broken"'},
    )
    assert response.status_code == 400
    assert target.question_text == 'Q1'


def test_update_question_rederives_running_attempt(admin_client, admin_user):
    quiz = make_quiz()
    started = admin_client.post(f'/quiz/api/quizzes/{quiz.quiz_id}/attempt').get_json()['data']
    admin_client.post('/quiz/api/attempt/answer', json={'option': started['question']['options'][0]})
    target = quiz.questions[1]

    admin_client.patch(
        f'/admin/api/quizzes/{quiz.quiz_id}/questions/{target.question_id}',
        json={'questionText': 'Q2', 'options': ['C', 'D', 'X'], 'correctAnswer': 'X'},
    )

    state = admin_client.get('/quiz/api/attempt').get_json()['data']
    assert state['progress'] == {'current': 1, 'total': 2, 'answered': 0}
    assert state['restarted'] is False
    with admin_client.session_transaction() as sess:
        refs = {ref[0]: ref[1] for ref in sess[QuizSessionConfig.SESSION_KEY]['questions']}
    assert sorted(refs[target.question_id]) == [0, 1, 2]


def test_update_question_keeps_finished_attempt(admin_client):
    quiz = make_quiz()
    data = admin_client.post(f'/quiz/api/quizzes/{quiz.quiz_id}/attempt').get_json()['data']
    while data['status'] == 'in_progress':
        admin_client.post('/quiz/api/attempt/answer', json={'option': data['question']['options'][0]})
        data = admin_client.post('/quiz/api/attempt/advance').get_json()['data']
    target = quiz.questions[1]

    admin_client.patch(
        f'/admin/api/quizzes/{quiz.quiz_id}/questions/{target.question_id}',
        json={'questionText': 'Q2', 'options': ['C', 'D', 'X'], 'correctAnswer': 'X'},
    )

    state = admin_client.get('/quiz/api/attempt').get_json()['data']
    assert state['status'] == 'completed'
    assert state['result'] == data['result']
    assert admin_client.post('/quiz/api/attempt/submit').status_code == 201


def test_assign_users(admin_client, learner):
    quiz = make_quiz()
    response = admin_client.put(f'/admin/api/quizzes/{quiz.quiz_id}/assign', json={'usernames': ['learner']})
    assert response.status_code == 200
    assert response.get_json()['data']['authorized_users'] == ['learner']
    assert quiz.is_visible_to(learner)


def test_assign_unknown_user(admin_client):
    quiz = make_quiz()
    response = admin_client.put(f'/admin/api/quizzes/{quiz.quiz_id}/assign', json={'usernames': ['ghost']})
    assert response.status_code == 400
    assert response.get_json()['details']['errors']['usernames'] == ['ghost']


def test_delete_quiz_removes_scores(admin_client, learner):
    quiz = make_quiz(authorized=[learner.username])
    db.session.add(Score(user_id=learner.user_id, quiz_id=quiz.quiz_id, score=1, total=2, answers=[]))
    db.session.commit()
    quiz_id = quiz.quiz_id

    response = admin_client.delete(f'/admin/api/quizzes/{quiz_id}')

    assert response.status_code == 200
    assert db.session.get(Quiz, quiz_id) is None
    assert Score.query.filter_by(quiz_id=quiz_id).count() == 0
    assert QuizQuestion.query.filter_by(quiz_id=quiz_id).count() == 0


def test_delete_missing_quiz(admin_client):
    assert admin_client.delete('/admin/api/quizzes/404').status_code == 404


def test_list_users(admin_client, learner):
    users = admin_client.get('/admin/api/users').get_json()['data']['users']
    assert {u['username'] for u in users} == {'admin', 'learner'}
    assert all('password_hash' not in u for u in users)


def test_init_quizzes_replaces_everything(admin_client):
    make_quiz(title='Old')
    response = admin_client.post('/admin/api/init-quizzes')
    assert response.status_code == 200
    assert sorted(q.title for q in Quiz.query.all()) == ['JavaScript Basics', 'Node.js Fundamentals']
