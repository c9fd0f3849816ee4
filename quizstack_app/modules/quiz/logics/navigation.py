from typing import Optional, Sequence

from ..schemas import QuizSummaryDTO


def suggest_next_quiz(quiz_list: Sequence[QuizSummaryDTO], current_quiz_id) -> Optional[QuizSummaryDTO]:
    """The quiz listed right after the current one, or None when it is last or missing."""
    for index, summary in enumerate(quiz_list):
        if summary.id == current_quiz_id:
            if index + 1 < len(quiz_list):
                return quiz_list[index + 1]
            return None
    return None
