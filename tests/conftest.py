"""Shared test fixtures and configuration for pytest."""

from datetime import datetime, timezone

import pytest

from src.config.settings import get_settings
from src.models.quiz import Quiz
from src.services.quiz_service import QuizService
from src.storage.blob import InMemoryBlobStore
from src.storage.metadata import MetadataStore
from src.validation.image_validator import ImageValidator
from tests.helpers import METADATA_PATH, StubGenerator, make_jpeg, make_png


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; tests that touch env need a fresh load."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A 10 KB JPEG."""
    return make_jpeg()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def metadata_store(blob_store: InMemoryBlobStore) -> MetadataStore:
    return MetadataStore(blob_store, path=METADATA_PATH)


@pytest.fixture
def stub_generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def image_validator() -> ImageValidator:
    return ImageValidator(max_file_size=64 * 1024)


@pytest.fixture
def quiz_service(
    blob_store: InMemoryBlobStore,
    metadata_store: MetadataStore,
    stub_generator: StubGenerator,
    image_validator: ImageValidator,
) -> QuizService:
    """QuizService over in-memory storage and a stub generator."""
    return QuizService(
        blob_store=blob_store,
        metadata_store=metadata_store,
        generator=stub_generator,
        image_validator=image_validator,
        signed_url_ttl_seconds=900,
    )


@pytest.fixture
def sample_quiz() -> Quiz:
    """Create a sample Quiz for testing."""
    return Quiz(
        id="quiz_1737000000000000000_00c0ffee",
        image_path="images/abc123.jpg",
        author_interpretation="a sunset over water",
        ai_interpretation="a painting of dusk",
        created_at=datetime(2025, 1, 16, 12, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_quiz():
    """Factory for distinct quizzes."""

    def _make(n: int) -> Quiz:
        return Quiz(
            id=f"quiz_{n}",
            image_path=f"images/{n}.jpg",
            author_interpretation=f"author text {n}",
            ai_interpretation=f"generated text {n}",
        )

    return _make
