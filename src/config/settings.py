"""Application settings and configuration."""

from enum import Enum
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class StorageBackend(str, Enum):
    """Where images and the metadata document live."""

    S3 = "s3"
    LOCAL = "local"
    MEMORY = "memory"


class GeneratorBackend(str, Enum):
    """Which capability produces the competing interpretation."""

    BEDROCK = "bedrock"
    COMMAND = "command"
    FIXTURE = "fixture"


class MetadataConsistency(str, Enum):
    """How concurrent writes to the metadata document are handled."""

    LAST_WRITER_WINS = "last_writer_wins"
    SERIALIZED = "serialized"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage Configuration
    storage_backend: StorageBackend = Field(
        default=StorageBackend.LOCAL,
        description="Blob storage backend",
        validation_alias="STORAGE_BACKEND",
    )
    bucket_name: str | None = Field(
        default=None,
        description="S3 bucket holding images and metadata",
        validation_alias="BUCKET_NAME",
    )
    aws_default_region: str | None = Field(
        default=None,
        description="AWS API region",
        validation_alias="AWS_DEFAULT_REGION",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint (e.g. MinIO or LocalStack)",
        validation_alias="S3_ENDPOINT_URL",
    )
    local_storage_dir: str = Field(
        default=".quiz-data",
        description="Root directory for the local storage backend",
        validation_alias="LOCAL_STORAGE_DIR",
    )
    metadata_path: str = Field(
        default="metadata/quizzes.json",
        min_length=1,
        description="Storage key of the metadata document",
        validation_alias="METADATA_PATH",
    )
    metadata_consistency: MetadataConsistency = Field(
        default=MetadataConsistency.LAST_WRITER_WINS,
        description="Write policy for the metadata document",
        validation_alias="METADATA_CONSISTENCY",
    )
    storage_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Connect/read timeout for storage calls",
        validation_alias="STORAGE_TIMEOUT_SECONDS",
    )

    # Upload Settings
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        gt=0,
        description="Maximum accepted upload size in bytes",
        validation_alias="MAX_FILE_SIZE",
    )
    signed_url_ttl_minutes: int = Field(
        default=15,
        ge=1,
        le=7 * 24 * 60,  # S3 presigned URLs cap out at 7 days
        description="Lifetime of signed image URLs",
        validation_alias="SIGNED_URL_TTL_MINUTES",
    )

    # Generator Configuration
    generator_backend: GeneratorBackend = Field(
        default=GeneratorBackend.FIXTURE,
        description="Interpretation generator backend",
        validation_alias="GENERATOR_BACKEND",
    )
    model_name: str = Field(
        default="anthropic.claude-3-7-sonnet-20250219-v1:0",
        description="Model to use (AWS Bedrock model ID)",
        validation_alias="MODEL_NAME",
    )
    generation_temperature: float = Field(
        default=0.9,  # we want a distractor that reads differently from the author
        ge=0.0,
        le=1.0,
        description="Temperature for interpretation generation",
        validation_alias="GENERATION_TEMPERATURE",
    )
    generator_command: str | None = Field(
        default=None,
        description="Command line for the command generator backend",
        validation_alias="GENERATOR_COMMAND",
    )
    fixture_interpretations_path: str | None = Field(
        default=None,
        description="JSON list of canned interpretations for the fixture backend",
        validation_alias="FIXTURE_INTERPRETATIONS_PATH",
    )
    generation_timeout_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout for a single generation call",
        validation_alias="GENERATION_TIMEOUT_SECONDS",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level",
        validation_alias="LOG_LEVEL",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
        validation_alias="LOG_FILE",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
    }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the level name and reject unknown ones."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def check_backend_requirements(self) -> "Settings":
        """Ensure the selected backends have what they need."""
        if self.storage_backend == StorageBackend.S3 and not self.bucket_name:
            raise ValueError("BUCKET_NAME is required for the s3 storage backend")
        if self.generator_backend == GeneratorBackend.COMMAND and not (self.generator_command or "").strip():
            raise ValueError("GENERATOR_COMMAND is required for the command generator backend")
        return self

    @property
    def signed_url_ttl_seconds(self) -> int:
        """Signed URL lifetime in seconds."""
        return self.signed_url_ttl_minutes * 60


# This is loaded the first time and then cached for further use
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
