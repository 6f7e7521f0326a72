"""Upload validation for quiz images."""

import logging
from pathlib import PurePath
from typing import BinaryIO

import filetype

from src.errors import FileTooLargeError, InvalidContentTypeError, StorageError, UnsupportedFormatError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})
ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png"})


def sniff_content_type(data: bytes) -> str | None:
    """
    Detect the MIME type of a buffer from its magic bytes.

    Args:
        data: Raw file contents

    Returns:
        MIME type string, or None if the type is not recognised
    """
    if not data:
        return None
    return filetype.guess_mime(data)


class ImageValidator:
    """Validates uploaded images and buffers them for downstream use."""

    def __init__(
        self,
        max_file_size: int,
        allowed_extensions: frozenset[str] = ALLOWED_EXTENSIONS,
        allowed_content_types: frozenset[str] = ALLOWED_CONTENT_TYPES,
    ):
        if max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
        self.max_file_size = max_file_size
        self.allowed_extensions = allowed_extensions
        self.allowed_content_types = allowed_content_types

    def validate_and_copy(self, stream: BinaryIO, filename: str) -> bytes:
        """
        Validate an upload and return its bytes.

        The extension is checked first, then at most max_file_size + 1 bytes
        are read, then the content type is sniffed from the buffer itself so a
        renamed file cannot pass as an image.

        Args:
            stream: Readable binary stream of the upload
            filename: Filename claimed by the uploader

        Returns:
            The fully buffered, validated image bytes

        Raises:
            UnsupportedFormatError: Extension not in the allow-list
            FileTooLargeError: More than max_file_size bytes available
            InvalidContentTypeError: Sniffed type not in the allow-list
            StorageError: The stream itself could not be read
        """
        ext = PurePath(filename or "").suffix.lower()
        if ext not in self.allowed_extensions:
            allowed = ", ".join(sorted(e.lstrip(".") for e in self.allowed_extensions))
            raise UnsupportedFormatError(
                f"Unsupported file format: {ext or '(none)'}. Allowed formats: {allowed}"
            )

        try:
            data = self._read_bounded(stream, self.max_file_size + 1)
        except OSError as e:
            raise StorageError(f"Failed to read upload: {e}") from e

        if len(data) > self.max_file_size:
            raise FileTooLargeError(
                f"File size exceeds maximum allowed size of {self.max_file_size} bytes"
            )

        content_type = sniff_content_type(data)
        if content_type not in self.allowed_content_types:
            raise InvalidContentTypeError(
                f"Invalid file type: {content_type or 'unknown'}. Only jpeg and png are allowed"
            )

        logger.debug("Validated upload %s (%d bytes, %s)", filename, len(data), content_type)
        return data

    @staticmethod
    def _read_bounded(stream: BinaryIO, limit: int) -> bytes:
        """Read until EOF or limit bytes, whichever comes first."""
        chunks: list[bytes] = []
        remaining = limit
        while remaining > 0:
            chunk = stream.read(min(remaining, 64 * 1024))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)
