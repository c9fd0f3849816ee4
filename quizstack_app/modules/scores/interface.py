"""Public API of the scores module for other modules."""

from quizstack_app.modules.quiz.schemas import ScoreRecordDTO


def save_score(record: ScoreRecordDTO, user) -> ScoreRecordDTO:
    from .services.score_repository import ScoreRepository
    return ScoreRepository.save(record, user)
