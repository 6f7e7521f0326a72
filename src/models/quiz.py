"""Pydantic models for quiz data structures."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class Quiz(BaseModel):
    """One image paired with the uploader's and the generated interpretation."""

    id: str = Field(..., min_length=1, description="Unique quiz identifier")
    image_path: str = Field(
        ...,
        min_length=1,
        description="Storage key of the uploaded image",
    )
    author_interpretation: str = Field(
        ...,
        min_length=1,
        description="Interpretation written by the uploader",
    )
    ai_interpretation: str = Field(
        ...,
        min_length=1,
        description="Competing interpretation produced by the generator",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    @field_validator("author_interpretation", "ai_interpretation")
    @classmethod
    def validate_interpretation(cls, v: str) -> str:
        """Reject whitespace-only interpretations without altering the text."""
        if not v.strip():
            raise ValueError("Interpretation cannot be blank")
        return v

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "quiz_1737000000000000000_1a2b3c4d",
                "image_path": "images/3f2b9c0e5d.jpg",
                "author_interpretation": "a sunset over water",
                "ai_interpretation": "a painting of dusk",
                "created_at": "2025-01-16T12:00:00Z",
            }
        },
    }


class QuizCollection(BaseModel):
    """The metadata document: every quiz, oldest first."""

    quizzes: list[Quiz] = Field(
        default_factory=list,
        description="Quizzes in insertion order",
    )

    def find(self, quiz_id: str) -> Quiz | None:
        """Linear scan for a quiz by id."""
        for quiz in self.quizzes:
            if quiz.id == quiz_id:
                return quiz
        return None

    @property
    def total_quizzes(self) -> int:
        """Get the number of stored quizzes."""
        return len(self.quizzes)


class QuizView(BaseModel):
    """Presentation shape of a quiz: signed image URL and shuffled answers."""

    id: str
    image_url: str
    interpretations: list[str] = Field(..., min_length=2, max_length=2)
    created_at: datetime


class QuizSummary(BaseModel):
    """Lightweight listing entry."""

    id: str
    created_at: datetime


# Structured output model for LLM responses


class GeneratedInterpretation(BaseModel):
    """Interpretation returned by the generator model."""

    interpretation: str = Field(
        ...,
        description="A short, plausible interpretation of the image that differs from the author's",
    )
