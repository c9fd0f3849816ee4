"""Database models package for QuizStack."""

from ..db_instance import db

from .user import User
from .quiz import Quiz, QuizQuestion
from .score import Score

__all__ = [
    'db',
    'User',
    'Quiz',
    'QuizQuestion',
    'Score',
]
