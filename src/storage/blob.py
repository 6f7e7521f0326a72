"""Blob storage backends for images and the metadata document."""

import logging
import os
import tempfile
import threading
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote, urlencode

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.errors import BlobNotFoundError, InvalidInputError, StorageError

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}


class BlobStore(ABC):
    """Minimal object-storage capability used by the quiz core."""

    image_prefix = "images"

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, path: str) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def signed_url(self, path: str, ttl_seconds: int) -> str:
        raise NotImplementedError

    def save(self, data: bytes, content_type: str | None = None) -> str:
        """
        Store image bytes under a fresh unique key.

        Args:
            data: Image contents
            content_type: MIME type, used for the key's extension

        Returns:
            Storage path of the new object
        """
        ext = CONTENT_TYPE_EXTENSIONS.get(content_type or "", "")
        path = f"{self.image_prefix}/{uuid.uuid4().hex}{ext}"
        self.put(path, data, content_type)
        return path


class S3BlobStore(BlobStore):
    """
    Blob store backed by an S3 bucket.

    The credentials need s3:ListBucket on the bucket as well as object read
    and write. Without it S3 answers a missing key with 403 AccessDenied
    instead of NoSuchKey, and a fresh bucket reads as a StorageError rather
    than an empty quiz list.
    """

    def __init__(
        self,
        bucket_name: str,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        timeout_seconds: float = 10.0,
        client=None,
    ):
        self.bucket_name = bucket_name
        if client is None:
            client = boto3.client(
                "s3",
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=Config(
                    signature_version="s3v4",
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    # Retry policy belongs to the caller
                    retries={"total_max_attempts": 1},
                ),
            )
        self.client = client

    def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        params = {"Bucket": self.bucket_name, "Key": path, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        try:
            self.client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to write s3://{self.bucket_name}/{path}: {e}") from e
        logger.debug("Wrote %d bytes to s3://%s/%s", len(data), self.bucket_name, path)

    def get(self, path: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=path)
            return response["Body"].read()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise BlobNotFoundError(f"Object not found: {path}") from e
            raise StorageError(f"Failed to read s3://{self.bucket_name}/{path}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to read s3://{self.bucket_name}/{path}: {e}") from e

    def signed_url(self, path: str, ttl_seconds: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": path},
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to sign URL for {path}: {e}") from e


class LocalBlobStore(BlobStore):
    """Blob store backed by a directory on the local filesystem."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root):
            raise InvalidInputError(f"Path escapes storage root: {path}")
        return target

    def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Write then rename so readers never see a half-written object
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {target}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), target)

    def get(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as e:
            raise BlobNotFoundError(f"Object not found: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {target}: {e}") from e

    def signed_url(self, path: str, ttl_seconds: int) -> str:
        target = self._resolve(path)
        if not target.exists():
            raise BlobNotFoundError(f"Object not found: {path}")
        expires = int(time.time()) + ttl_seconds
        return f"{target.as_uri()}?{urlencode({'expires': expires})}"


class InMemoryBlobStore(BlobStore):
    """Process-local blob store, for development and tests."""

    def __init__(self, name: str = "quiz"):
        self.name = name
        self._objects: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def put(self, path: str, data: bytes, content_type: str | None = None) -> None:
        with self._lock:
            self._objects[path] = bytes(data)

    def get(self, path: str) -> bytes:
        with self._lock:
            try:
                return self._objects[path]
            except KeyError as e:
                raise BlobNotFoundError(f"Object not found: {path}") from e

    def signed_url(self, path: str, ttl_seconds: int) -> str:
        with self._lock:
            if path not in self._objects:
                raise BlobNotFoundError(f"Object not found: {path}")
        expires = int(time.time()) + ttl_seconds
        return f"memory://{self.name}/{quote(path)}?{urlencode({'expires': expires})}"

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._objects

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)
