"""Interpretation generator serving canned answers."""

import itertools
import json
import logging
import threading
from pathlib import Path

from src.errors import GenerationError
from src.generators.base import InterpretationGenerator

logger = logging.getLogger(__name__)

DEFAULT_INTERPRETATIONS = [
    "a quiet moment before a storm",
    "a memory of a summer that never happened",
    "someone waiting for a train that is late",
    "the last light of a long working day",
    "a place I used to visit as a child",
]


def load_interpretations(path: str | Path) -> list[str]:
    """
    Load canned interpretations from a JSON file containing a list of strings.

    Raises:
        GenerationError: File missing, unreadable or of the wrong shape
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise GenerationError(f"Failed to load fixture interpretations from {path}: {e}") from e

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise GenerationError(f"Fixture file {path} must contain a JSON list of strings")
    return data


class FixtureInterpretationGenerator(InterpretationGenerator):
    """Cycles through a fixed list, skipping entries equal to the author's text."""

    def __init__(self, interpretations: list[str] | None = None):
        if interpretations is None:
            interpretations = DEFAULT_INTERPRETATIONS
        cleaned = [text for text in interpretations if text.strip()]
        if not cleaned:
            raise ValueError("At least one non-empty interpretation is required")
        self.interpretations = cleaned
        self._cycle = itertools.cycle(cleaned)
        self._lock = threading.Lock()

    @classmethod
    def from_file(cls, path: str | Path) -> "FixtureInterpretationGenerator":
        return cls(load_interpretations(path))

    def interpret(self, image_bytes: bytes, author_text: str) -> str:
        with self._lock:
            for _ in range(len(self.interpretations)):
                candidate = next(self._cycle)
                if candidate != author_text:
                    return candidate
                logger.warning("Skipping fixture interpretation identical to the author's text")
        raise GenerationError("No fixture interpretation differs from the author's text")
