"""Score history database model."""

from __future__ import annotations

from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from ..db_instance import db


class Score(db.Model):
    """A submitted quiz attempt. Rows are written once and never updated."""

    __tablename__ = 'scores'

    score_id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False, index=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.quiz_id', ondelete='CASCADE'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    total = db.Column(db.Integer, nullable=False)
    # [{'question_id': ..., 'selected_answer': ..., 'is_correct': ...}, ...]
    answers = db.Column(JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now(), index=True)

    quiz = db.relationship('Quiz', lazy=True)

    def __repr__(self):
        return f"<Score {self.score_id}: {self.score}/{self.total}>"
