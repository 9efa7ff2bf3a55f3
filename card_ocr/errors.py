from enum import Enum
from typing import Optional


class AuthorizationStatus(Enum):
    NOT_DETERMINED = "not_determined"
    RESTRICTED = "restricted"
    DENIED = "denied"
    AUTHORIZED = "authorized"


class CardReaderError(Exception):
    """Base class for session-level card reader failures."""


class CameraInitializationError(CardReaderError):
    """No capture device could be opened."""

    def __init__(self, message: str = "Could not open webcam"):
        super().__init__(message)


class CameraPermissionError(CardReaderError):
    """Access to the camera was denied or is restricted."""

    def __init__(self, authorization_status: AuthorizationStatus, device: Optional[str] = None):
        self.authorization_status = authorization_status
        self.device = device
        detail = f" ({device})" if device else ""
        super().__init__(f"Camera permission {authorization_status.value}{detail}")
