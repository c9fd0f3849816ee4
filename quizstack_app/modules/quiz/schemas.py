from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class QuestionDTO:
    id: int
    question_text: str
    options: List[str]
    correct_answer: str
    explanation: Optional[str] = None
    points: int = 1
    original_question_source: Optional[str] = None

    def to_public_dict(self) -> Dict[str, Any]:
        """Shape sent to the learner before answering (no correct answer)."""
        return {
            'id': self.id,
            'question_text': self.question_text,
            'options': list(self.options),
            'points': self.points,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['options'] = list(self.options)
        return data


@dataclass
class QuizDTO:
    id: int
    title: str
    category: str
    questions: List[QuestionDTO]
    description: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    authorized_users: List[str] = field(default_factory=list)

    def question_by_id(self, question_id) -> Optional[QuestionDTO]:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'question_count': len(self.questions),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_public_dict()
        data['created_by'] = self.created_by
        data['authorized_users'] = list(self.authorized_users)
        data['questions'] = [q.to_dict() for q in self.questions]
        return data


@dataclass(frozen=True)
class QuizSummaryDTO:
    id: int
    title: str
    category: str
    question_count: int
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AnswerReportDTO:
    question_id: int
    selected_answer: Optional[str]
    is_correct: bool


@dataclass
class ScoreRecordDTO:
    user_id: int
    quiz_id: int
    score: int
    total: int
    answers: List[AnswerReportDTO]
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'quiz_id': self.quiz_id,
            'score': self.score,
            'total': self.total,
            'answers': [asdict(a) for a in self.answers],
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
