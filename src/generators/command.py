"""Interpretation generator that shells out to an external command."""

import logging
import shlex
import subprocess

from src.errors import GenerationError
from src.generators.base import InterpretationGenerator

logger = logging.getLogger(__name__)


class CommandInterpretationGenerator(InterpretationGenerator):
    """
    Runs a command line tool once per request.

    The image is written to the command's stdin and the author's text is
    appended as the last argument. Whatever the command prints on stdout,
    stripped, is the interpretation.
    """

    def __init__(self, command: str | list[str], timeout_seconds: float = 60.0):
        args = shlex.split(command) if isinstance(command, str) else list(command)
        if not args:
            raise ValueError("Generator command cannot be empty")
        self.args = args
        self.timeout_seconds = timeout_seconds

    def interpret(self, image_bytes: bytes, author_text: str) -> str:
        try:
            completed = subprocess.run(
                [*self.args, author_text],
                input=image_bytes,
                capture_output=True,
                timeout=self.timeout_seconds,
                check=True,
            )
        except subprocess.TimeoutExpired as e:
            raise GenerationError(
                f"Generator command timed out after {self.timeout_seconds}s"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise GenerationError(
                f"Generator command exited with status {e.returncode}: {stderr}"
            ) from e
        except OSError as e:
            raise GenerationError(f"Failed to run generator command: {e}") from e

        try:
            return completed.stdout.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise GenerationError("Generator command printed invalid UTF-8") from e
