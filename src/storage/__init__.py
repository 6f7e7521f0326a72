"""Blob storage and the quiz metadata store."""

from .blob import BlobStore, InMemoryBlobStore, LocalBlobStore, S3BlobStore
from .metadata import (
    ConsistencyPolicy,
    LastWriterWinsPolicy,
    MetadataStore,
    SerializedWriterPolicy,
    create_consistency_policy,
)

__all__ = [
    "BlobStore",
    "S3BlobStore",
    "LocalBlobStore",
    "InMemoryBlobStore",
    "MetadataStore",
    "ConsistencyPolicy",
    "LastWriterWinsPolicy",
    "SerializedWriterPolicy",
    "create_consistency_policy",
]
