"""
Pytest configuration and fixtures for card OCR tests.
"""
import numpy as np
import pytest

from card_ocr.models import RecognizedLine


def _lines(*texts, confidence=0.9):
    """Build recognized lines with a shared confidence."""
    return [RecognizedLine(text, confidence) for text in texts]


class FakeBackend:
    """OCR backend that returns the same lines for every frame."""

    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = 0

    def recognize(self, frame):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.result)


class FakeCamera:
    """Camera that yields a fixed number of frames, then nothing."""

    def __init__(self, frames=5, open_error=None):
        self.frames = frames
        self.open_error = open_error
        self.is_open = False
        self.released = False

    def open(self):
        if self.open_error is not None:
            raise self.open_error
        self.is_open = True
        return self

    def read(self):
        if not self.is_open or self.frames <= 0:
            return None
        self.frames -= 1
        return np.zeros((10, 10, 3), dtype=np.uint8)

    def release(self):
        self.is_open = False
        self.released = True


@pytest.fixture
def card_lines():
    """A clean frame: card number plus expiration."""
    return _lines("4111 1234 5678 9010", "VALID THRU 09/25")


@pytest.fixture
def number_only_lines():
    return _lines("4111 1234 5678 9010", "JOHN SMITH")


@pytest.fixture
def emitted():
    """Collects (record, resume) pairs passed to the emit callback."""
    return []


@pytest.fixture
def make_lines():
    """Factory for one frame's recognized lines."""
    return _lines


@pytest.fixture
def fake_backend():
    return FakeBackend


@pytest.fixture
def fake_camera():
    return FakeCamera
