"""Tests for the upload image validator."""

import io

import pytest

from src.errors import (
    FileTooLargeError,
    InvalidContentTypeError,
    InvalidInputError,
    StorageError,
    UnsupportedFormatError,
)
from src.validation.image_validator import ImageValidator, sniff_content_type
from tests.helpers import make_jpeg


class TestSniffContentType:
    """Test magic-byte content type detection."""

    def test_detects_jpeg(self, jpeg_bytes: bytes):
        assert sniff_content_type(jpeg_bytes) == "image/jpeg"

    def test_detects_png(self, png_bytes: bytes):
        assert sniff_content_type(png_bytes) == "image/png"

    def test_unknown_content(self):
        assert sniff_content_type(b"just some text") is None

    def test_empty_buffer(self):
        assert sniff_content_type(b"") is None


class TestValidateAndCopy:
    """Test ImageValidator.validate_and_copy."""

    @pytest.mark.parametrize("filename", ["photo.jpg", "photo.jpeg", "PHOTO.JPG", "a.b.Jpeg"])
    def test_accepts_jpeg_extensions(self, image_validator: ImageValidator, jpeg_bytes: bytes, filename: str):
        """Test that jpeg data with any allowed extension spelling passes."""
        data = image_validator.validate_and_copy(io.BytesIO(jpeg_bytes), filename)

        assert data == jpeg_bytes

    def test_accepts_png(self, image_validator: ImageValidator, png_bytes: bytes):
        """Test that png data passes."""
        assert image_validator.validate_and_copy(io.BytesIO(png_bytes), "image.png") == png_bytes

    @pytest.mark.parametrize(
        "filename",
        ["photo.gif", "photo.bmp", "photo.webp", "photo.txt", "photo", "jpg", ".hidden", ""],
    )
    def test_rejects_unsupported_extension(self, image_validator: ImageValidator, jpeg_bytes: bytes, filename: str):
        """Test that anything outside jpg/jpeg/png is UnsupportedFormat."""
        with pytest.raises(UnsupportedFormatError):
            image_validator.validate_and_copy(io.BytesIO(jpeg_bytes), filename)

    def test_extension_checked_before_reading(self, image_validator: ImageValidator):
        """Test that a bad extension is rejected without touching the stream."""
        stream = io.BytesIO(b"x" * 10)
        with pytest.raises(UnsupportedFormatError):
            image_validator.validate_and_copy(stream, "notes.txt")

        assert stream.tell() == 0

    def test_rejects_oversize_file(self):
        """Test that input beyond the limit is FileTooLarge."""
        validator = ImageValidator(max_file_size=1024)
        with pytest.raises(FileTooLargeError):
            validator.validate_and_copy(io.BytesIO(make_jpeg(2048)), "big.jpg")

    def test_accepts_file_of_exactly_max_size(self):
        """Test the boundary: exactly max_file_size bytes is allowed."""
        validator = ImageValidator(max_file_size=4096)
        data = make_jpeg(4096)

        assert validator.validate_and_copy(io.BytesIO(data), "edge.jpg") == data

    def test_rejects_one_byte_over_max_size(self):
        validator = ImageValidator(max_file_size=4096)
        with pytest.raises(FileTooLargeError):
            validator.validate_and_copy(io.BytesIO(make_jpeg(4097)), "edge.jpg")

    def test_bounded_read(self):
        """Test that no more than max_file_size + 1 bytes are consumed."""
        validator = ImageValidator(max_file_size=1024)
        stream = io.BytesIO(make_jpeg(1024 * 1024))
        with pytest.raises(FileTooLargeError):
            validator.validate_and_copy(stream, "huge.jpg")

        assert stream.tell() == 1025

    def test_rejects_spoofed_extension(self, image_validator: ImageValidator):
        """Test that a text file named .jpg is InvalidContentType."""
        with pytest.raises(InvalidContentTypeError):
            image_validator.validate_and_copy(io.BytesIO(b"definitely not an image"), "fake.jpg")

    def test_rejects_other_image_type_with_allowed_extension(self, image_validator: ImageValidator):
        """Test that a GIF renamed to .png is rejected."""
        gif = b"GIF89a" + b"\x00" * 64
        with pytest.raises(InvalidContentTypeError):
            image_validator.validate_and_copy(io.BytesIO(gif), "animated.png")

    def test_rejects_empty_upload(self, image_validator: ImageValidator):
        with pytest.raises(InvalidContentTypeError):
            image_validator.validate_and_copy(io.BytesIO(b""), "empty.png")

    def test_validation_errors_are_client_errors(self, image_validator: ImageValidator):
        """Test that all validation failures classify as invalid input."""
        with pytest.raises(InvalidInputError) as exc_info:
            image_validator.validate_and_copy(io.BytesIO(b""), "empty.gif")

        assert exc_info.value.is_client_error

    def test_unreadable_stream_is_storage_error(self, image_validator: ImageValidator):
        """Test that a failing stream is reported, not swallowed."""

        class BrokenStream(io.RawIOBase):
            def read(self, size=-1):
                raise OSError("connection reset")

        with pytest.raises(StorageError):
            image_validator.validate_and_copy(BrokenStream(), "photo.jpg")

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            ImageValidator(max_file_size=0)
