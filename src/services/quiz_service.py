"""Quiz lifecycle: creation, retrieval, presentation and scoring."""

import logging
import random
import secrets
import time
from datetime import datetime, timezone
from typing import BinaryIO

from src.errors import GenerationError, InvalidInputError, StorageError
from src.generators.base import InterpretationGenerator
from src.models.quiz import Quiz, QuizSummary, QuizView
from src.storage.blob import BlobStore
from src.storage.metadata import MetadataStore
from src.validation.image_validator import ImageValidator, sniff_content_type

logger = logging.getLogger(__name__)

DEFAULT_SIGNED_URL_TTL_SECONDS = 15 * 60


def generate_quiz_id() -> str:
    """Time-derived id with a random suffix so same-nanosecond calls still differ."""
    return f"quiz_{time.time_ns()}_{secrets.token_hex(4)}"


class QuizService:
    """
    Orchestrates the quiz lifecycle over storage and generation backends.

    The service only sees the abstract capabilities; which concrete
    backends are in play is decided when it is constructed.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        generator: InterpretationGenerator,
        image_validator: ImageValidator,
        signed_url_ttl_seconds: int = DEFAULT_SIGNED_URL_TTL_SECONDS,
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.generator = generator
        self.image_validator = image_validator
        self.signed_url_ttl_seconds = signed_url_ttl_seconds

    def create_quiz_from_upload(
        self, stream: BinaryIO, filename: str, author_interpretation: str
    ) -> Quiz:
        """
        Validate an uploaded image and create a quiz from it.

        Args:
            stream: Binary stream of the upload
            filename: Filename claimed by the uploader
            author_interpretation: The uploader's interpretation

        Returns:
            The persisted Quiz
        """
        image_bytes = self.image_validator.validate_and_copy(stream, filename)
        return self.create_quiz(image_bytes, author_interpretation)

    def create_quiz(self, image_bytes: bytes, author_interpretation: str) -> Quiz:
        """
        Create and persist a quiz.

        Steps run strictly in order: store image, generate the competing
        interpretation, persist the record. Nothing is retried and a failed
        persist leaves the stored image behind.

        Args:
            image_bytes: Validated image contents
            author_interpretation: The uploader's interpretation

        Returns:
            The persisted Quiz

        Raises:
            InvalidInputError: Empty image or interpretation
            StorageError: Image or metadata write failed
            GenerationError: Generator failed or returned unusable text
            CorruptMetadataError: Existing metadata document is unreadable
        """
        if not image_bytes:
            raise InvalidInputError("Image data is required")
        if not author_interpretation or not author_interpretation.strip():
            raise InvalidInputError("Author interpretation is required")

        image_path = self.blob_store.save(image_bytes, sniff_content_type(image_bytes))
        logger.debug("Stored image at %s", image_path)

        ai_interpretation = self.generator.interpret(image_bytes, author_interpretation)
        if not ai_interpretation or not ai_interpretation.strip():
            raise GenerationError("Generator returned an empty interpretation")
        if ai_interpretation == author_interpretation:
            raise GenerationError("Generator repeated the author's interpretation")

        quiz = Quiz(
            id=generate_quiz_id(),
            image_path=image_path,
            author_interpretation=author_interpretation,
            ai_interpretation=ai_interpretation,
            created_at=datetime.now(timezone.utc),
        )

        try:
            self.metadata_store.append(quiz)
        except StorageError:
            logger.warning("Quiz %s not persisted; image %s is orphaned", quiz.id, image_path)
            raise

        logger.info("Created quiz %s", quiz.id)
        return quiz

    def get_quiz(self, quiz_id: str) -> Quiz:
        """Get a quiz by id, raising NotFoundError if it does not exist."""
        if not quiz_id:
            raise InvalidInputError("Quiz id is required")
        return self.metadata_store.get_by_id(quiz_id)

    def get_quiz_list(self) -> list[Quiz]:
        """Get every quiz, oldest first, without signing or shuffling."""
        return self.metadata_store.list()

    def get_quiz_summaries(self) -> list[QuizSummary]:
        return [QuizSummary(id=q.id, created_at=q.created_at) for q in self.get_quiz_list()]

    def get_randomized_interpretations(self, quiz: Quiz) -> list[str]:
        """
        Return both interpretations in random order.

        A new OS-seeded Random is used on every call so orderings are
        independent across calls and threads.
        """
        interpretations = [quiz.author_interpretation, quiz.ai_interpretation]
        random.Random().shuffle(interpretations)
        return interpretations

    def verify_answer(self, quiz: Quiz, selected_interpretation: str) -> bool:
        """True only if the selection is exactly the author's interpretation."""
        return selected_interpretation == quiz.author_interpretation

    def get_signed_image_url(self, image_path: str) -> str:
        """Issue a time-limited read URL for a stored image."""
        if not image_path:
            raise InvalidInputError("Image path is required")
        return self.blob_store.signed_url(image_path, self.signed_url_ttl_seconds)

    def build_quiz_view(self, quiz: Quiz) -> QuizView:
        """Assemble what a player sees: signed image URL and shuffled answers."""
        return QuizView(
            id=quiz.id,
            image_url=self.get_signed_image_url(quiz.image_path),
            interpretations=self.get_randomized_interpretations(quiz),
            created_at=quiz.created_at,
        )

    def delete_all_quizzes(self) -> None:
        """Remove every quiz at once."""
        self.metadata_store.clear_all()
        logger.info("Cleared all quizzes")
