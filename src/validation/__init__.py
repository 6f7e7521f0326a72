"""Upload validation."""

from .image_validator import ImageValidator, sniff_content_type

__all__ = ["ImageValidator", "sniff_content_type"]
