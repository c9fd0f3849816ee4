from .authoring_service import QuizAuthoringService

__all__ = ['QuizAuthoringService']
