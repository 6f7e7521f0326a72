"""Error taxonomy shared by the quiz core and its adapters."""


class QuizError(Exception):
    """Base class for every error raised by the quiz core."""

    # Client errors are caller-fixable; everything else is a server-side failure
    is_client_error: bool = False


class InvalidInputError(QuizError):
    """Caller supplied something unusable (empty fields, bad upload, ...)."""

    is_client_error = True


class UnsupportedFormatError(InvalidInputError):
    """Upload filename extension is not one of the allowed image formats."""


class FileTooLargeError(InvalidInputError):
    """Upload exceeded the configured maximum size."""


class InvalidContentTypeError(InvalidInputError):
    """Sniffed content type of the upload is not an allowed image type."""


class NotFoundError(QuizError):
    """No quiz exists with the requested id."""

    is_client_error = True


class BlobNotFoundError(NotFoundError):
    """No object exists at the requested storage path."""


class StorageError(QuizError):
    """Blob or metadata I/O failed. Transient; safe to retry higher up."""


class GenerationError(QuizError):
    """The interpretation generator failed or returned unusable output."""


class CorruptMetadataError(QuizError):
    """The stored metadata document cannot be parsed."""
