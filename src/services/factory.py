"""Wires concrete backends into a QuizService from settings."""

from src.config.settings import GeneratorBackend, Settings, StorageBackend
from src.generators.base import InterpretationGenerator
from src.generators.bedrock import BedrockInterpretationGenerator
from src.generators.command import CommandInterpretationGenerator
from src.generators.fixture import FixtureInterpretationGenerator
from src.services.quiz_service import QuizService
from src.storage.blob import BlobStore, InMemoryBlobStore, LocalBlobStore, S3BlobStore
from src.storage.metadata import MetadataStore, create_consistency_policy
from src.validation.image_validator import ImageValidator


def create_blob_store(settings: Settings) -> BlobStore:
    """Build the configured blob storage backend."""
    if settings.storage_backend == StorageBackend.S3:
        return S3BlobStore(
            bucket_name=settings.bucket_name,
            region_name=settings.aws_default_region,
            endpoint_url=settings.s3_endpoint_url,
            timeout_seconds=settings.storage_timeout_seconds,
        )
    if settings.storage_backend == StorageBackend.MEMORY:
        return InMemoryBlobStore()
    return LocalBlobStore(settings.local_storage_dir)


def create_generator(settings: Settings) -> InterpretationGenerator:
    """Build the configured interpretation generator."""
    if settings.generator_backend == GeneratorBackend.BEDROCK:
        return BedrockInterpretationGenerator(
            model_name=settings.model_name,
            temperature=settings.generation_temperature,
            region_name=settings.aws_default_region,
            timeout_seconds=settings.generation_timeout_seconds,
        )
    if settings.generator_backend == GeneratorBackend.COMMAND:
        return CommandInterpretationGenerator(
            settings.generator_command,
            timeout_seconds=settings.generation_timeout_seconds,
        )
    if settings.fixture_interpretations_path:
        return FixtureInterpretationGenerator.from_file(settings.fixture_interpretations_path)
    return FixtureInterpretationGenerator()


def create_quiz_service(settings: Settings) -> QuizService:
    """
    Build a QuizService with every backend chosen from settings.

    Args:
        settings: Application settings

    Returns:
        Ready-to-use QuizService
    """
    blob_store = create_blob_store(settings)
    metadata_store = MetadataStore(
        blob_store,
        path=settings.metadata_path,
        policy=create_consistency_policy(settings.metadata_consistency),
    )
    return QuizService(
        blob_store=blob_store,
        metadata_store=metadata_store,
        generator=create_generator(settings),
        image_validator=ImageValidator(settings.max_file_size),
        signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
    )
