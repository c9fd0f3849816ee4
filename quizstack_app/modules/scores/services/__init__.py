from .score_repository import ScoreRepository

__all__ = ['ScoreRepository']
