"""Interpretation generator capability."""

from abc import ABC, abstractmethod


class InterpretationGenerator(ABC):
    """Produces a plausible interpretation of an image that differs from the author's."""

    @abstractmethod
    def interpret(self, image_bytes: bytes, author_text: str) -> str:
        """
        Generate a competing interpretation.

        Args:
            image_bytes: The uploaded image
            author_text: The uploader's own interpretation

        Returns:
            Generated interpretation text

        Raises:
            GenerationError: The backend failed
        """
        raise NotImplementedError
