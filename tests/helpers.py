"""Test doubles and sample data builders."""

import struct
import threading
import zlib

from src.errors import BlobNotFoundError
from src.generators.fixture import FixtureInterpretationGenerator
from src.storage.blob import InMemoryBlobStore

METADATA_PATH = "metadata/quizzes.json"


def make_jpeg(size: int = 10 * 1024) -> bytes:
    """Build a JPEG-signed buffer of exactly `size` bytes."""
    header = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    trailer = b"\xff\xd9"
    return header + b"\x00" * (size - len(header) - len(trailer)) + trailer


def make_png() -> bytes:
    """Build a minimal 1x1 PNG."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + kind
            + data
            + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)
        )

    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
    idat = zlib.compress(b"\x00\xff\x00\x00")
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", idat) + chunk(b"IEND", b"")


class BarrierBlobStore(InMemoryBlobStore):
    """
    In-memory store that holds metadata readers at a barrier.

    The first `parties` readers of the gated path wait until all of them have
    loaded the same base document, which forces the read-modify-write
    interleaving that loses an update. Later reads pass straight through.
    """

    def __init__(self, parties: int, gated_path: str = METADATA_PATH):
        super().__init__()
        self.gated_path = gated_path
        self.barrier = threading.Barrier(parties, timeout=5)
        self._gated_reads = parties
        self._gate_lock = threading.Lock()

    def _take_gate(self) -> bool:
        with self._gate_lock:
            if self._gated_reads == 0:
                return False
            self._gated_reads -= 1
            return True

    def get(self, path: str) -> bytes:
        if path != self.gated_path or not self._take_gate():
            return super().get(path)
        try:
            data = super().get(path)
            missing = None
        except BlobNotFoundError as e:
            data, missing = None, e
        self.barrier.wait()
        if missing is not None:
            raise missing
        return data


class StubGenerator(FixtureInterpretationGenerator):
    """Generator that always answers with one text and records its calls."""

    def __init__(self, text: str = "a painting of dusk"):
        super().__init__([text])
        self.calls: list[tuple[bytes, str]] = []

    def interpret(self, image_bytes: bytes, author_text: str) -> str:
        self.calls.append((image_bytes, author_text))
        return super().interpret(image_bytes, author_text)
