"""Quiz and question database models."""

from __future__ import annotations

from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from ..db_instance import db


class Quiz(db.Model):
    """A titled, categorised list of multiple-choice questions."""

    __tablename__ = 'quizzes'

    quiz_id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(120), nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    # Usernames allowed to take the quiz without the admin role
    authorized_users = db.Column(JSON, nullable=False, default=list)

    creator = db.relationship('User', lazy=True, foreign_keys=[created_by])
    questions = db.relationship(
        'QuizQuestion',
        backref='quiz',
        lazy=True,
        order_by='QuizQuestion.position',
        cascade='all, delete-orphan',
    )

    def is_visible_to(self, user) -> bool:
        if user is None or not getattr(user, 'is_authenticated', False):
            return False
        if getattr(user, 'is_admin', False):
            return True
        return user.username in (self.authorized_users or [])

    def __repr__(self):
        return f"<Quiz {self.quiz_id}: {self.title}>"


class QuizQuestion(db.Model):
    """One multiple-choice question; ``correct_answer`` is one of ``options``."""

    __tablename__ = 'quiz_questions'

    question_id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(
        db.Integer, db.ForeignKey('quizzes.quiz_id', ondelete='CASCADE'), nullable=False, index=True
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    question_text = db.Column(db.Text, nullable=False)
    options = db.Column(JSON, nullable=False, default=list)
    correct_answer = db.Column(db.Text, nullable=False)
    explanation = db.Column(db.Text, nullable=True)
    points = db.Column(db.Integer, nullable=False, default=1)
    original_question_source = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f"<QuizQuestion {self.question_id} of quiz {self.quiz_id}>"
