"""Document-style quiz metadata store on top of a single blob."""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager, nullcontext
from typing import ContextManager, Iterator

from pydantic import ValidationError

from src.config.settings import MetadataConsistency
from src.errors import BlobNotFoundError, CorruptMetadataError, NotFoundError
from src.models.quiz import Quiz, QuizCollection
from src.storage.blob import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_METADATA_PATH = "metadata/quizzes.json"


class ConsistencyPolicy(ABC):
    """Decides what guards the read-modify-write of the metadata document."""

    name: str

    @abstractmethod
    def write_section(self) -> ContextManager[None]:
        raise NotImplementedError


class LastWriterWinsPolicy(ConsistencyPolicy):
    """
    No coordination at all.

    Two writers that load the same base document both write back their own
    version and the later write replaces the earlier one. The earlier
    append is lost without an error.
    """

    name = MetadataConsistency.LAST_WRITER_WINS.value

    def write_section(self) -> ContextManager[None]:
        return nullcontext()


class SerializedWriterPolicy(ConsistencyPolicy):
    """Single writer at a time within this process."""

    name = MetadataConsistency.SERIALIZED.value

    def __init__(self):
        self._lock = threading.Lock()

    @contextmanager
    def write_section(self) -> Iterator[None]:
        with self._lock:
            yield


def create_consistency_policy(mode: MetadataConsistency) -> ConsistencyPolicy:
    """Build the policy object for a configured consistency mode."""
    if mode == MetadataConsistency.SERIALIZED:
        return SerializedWriterPolicy()
    return LastWriterWinsPolicy()


class MetadataStore:
    """
    All quizzes, kept as one JSON document at a fixed blob path.

    Every operation loads the whole document. Writers replace it in one
    shot, so the document is always either the old or the new version.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        path: str = DEFAULT_METADATA_PATH,
        policy: ConsistencyPolicy | None = None,
    ):
        self.blob_store = blob_store
        self.path = path
        self.policy = policy or LastWriterWinsPolicy()

    def _load(self) -> QuizCollection:
        try:
            raw = self.blob_store.get(self.path)
        except BlobNotFoundError:
            # Nothing written yet
            return QuizCollection()
        try:
            return QuizCollection.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptMetadataError(f"Metadata document {self.path} is unreadable: {e}") from e

    def _save(self, collection: QuizCollection) -> None:
        self.blob_store.put(
            self.path,
            collection.model_dump_json().encode("utf-8"),
            content_type="application/json",
        )

    def append(self, quiz: Quiz) -> None:
        """
        Add a quiz to the end of the collection.

        Args:
            quiz: Quiz to persist

        Raises:
            StorageError: Blob read or write failed
            CorruptMetadataError: Existing document cannot be parsed
        """
        with self.policy.write_section():
            collection = self._load()
            collection.quizzes.append(quiz)
            self._save(collection)
        logger.debug("Appended quiz %s (%d total)", quiz.id, collection.total_quizzes)

    def get_by_id(self, quiz_id: str) -> Quiz:
        """
        Look up a quiz by id.

        Raises:
            NotFoundError: No quiz with this id
        """
        quiz = self._load().find(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz not found: {quiz_id}")
        return quiz

    def list(self) -> list[Quiz]:
        """Return every quiz, oldest first."""
        return self._load().quizzes

    def clear_all(self) -> None:
        """Replace the document with an empty collection."""
        with self.policy.write_section():
            self._save(QuizCollection())
