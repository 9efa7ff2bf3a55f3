"""
Card OCR — read payment card number and expiration from a live OCR stream.

Recognized text lines of each frame are matched, resolved into one
candidate per frame, and gated by a capture session that only emits a
record once it is final.
"""
from .errors import (
    AuthorizationStatus,
    CameraInitializationError,
    CameraPermissionError,
    CardReaderError,
)
from .extractor import extract
from .matchers import match_card_number, match_expiration, match_quick_read_number
from .models import CardCandidate, CardRecord, Expiration, RecognizedLine, SessionState
from .session import CaptureSession

__version__ = "0.1.0"

__all__ = [
    'AuthorizationStatus',
    'CameraInitializationError',
    'CameraPermissionError',
    'CardReaderError',
    'CaptureSession',
    'CardCandidate',
    'CardRecord',
    'Expiration',
    'RecognizedLine',
    'SessionState',
    'extract',
    'match_card_number',
    'match_expiration',
    'match_quick_read_number',
]
