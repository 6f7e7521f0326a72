"""Quiz lifecycle service."""

from .factory import create_quiz_service
from .quiz_service import QuizService, generate_quiz_id

__all__ = ["QuizService", "create_quiz_service", "generate_quiz_id"]
