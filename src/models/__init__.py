"""Data models for the interpretation quiz."""

from .quiz import (
    # Structured output models
    GeneratedInterpretation,
    Quiz,
    QuizCollection,
    QuizSummary,
    QuizView,
)

__all__ = [
    "Quiz",
    "QuizCollection",
    "QuizView",
    "QuizSummary",
    "GeneratedInterpretation",
]
