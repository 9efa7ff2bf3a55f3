import logging
import os
import sys
from typing import Optional, Sequence

import cv2
import numpy as np

from .config import CAMERA_INDICES, FRAME_HEIGHT, FRAME_WIDTH
from .errors import AuthorizationStatus, CameraInitializationError, CameraPermissionError

logger = logging.getLogger(__name__)

DEVICE_PATH = "/dev/video{}"


def check_device_permission(camera_index: int) -> None:
    """
    Raise CameraPermissionError if the V4L2 node exists but can't be read.

    Only meaningful on Linux; other platforms report problems through
    VideoCapture itself.
    """
    if not sys.platform.startswith("linux"):
        return
    device_path = DEVICE_PATH.format(camera_index)
    if os.path.exists(device_path) and not os.access(device_path, os.R_OK | os.W_OK):
        raise CameraPermissionError(AuthorizationStatus.DENIED, device=device_path)


class Camera:
    """Webcam handle that tries each configured index until one opens."""

    def __init__(
        self,
        indices: Sequence[int] = CAMERA_INDICES,
        width: int = FRAME_WIDTH,
        height: int = FRAME_HEIGHT,
    ):
        self.indices = tuple(indices)
        self.width = width
        self.height = height
        self.capture: Optional[cv2.VideoCapture] = None
        self.index: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.capture is not None and self.capture.isOpened()

    def open(self) -> "Camera":
        if self.is_open:
            return self

        permission_error = None
        for camera_index in self.indices:
            try:
                check_device_permission(camera_index)
            except CameraPermissionError as e:
                logger.warning(str(e))
                permission_error = e
                continue

            cap = cv2.VideoCapture(camera_index)
            if cap.isOpened():
                logger.info("Camera %d opened", camera_index)
                self.capture = cap
                self.index = camera_index
                break
            cap.release()

        if not self.is_open:
            if permission_error is not None:
                raise permission_error
            raise CameraInitializationError(f"Could not open webcam (tried {list(self.indices)})")

        self.capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.capture.set(cv2.CAP_PROP_AUTOFOCUS, 1)
        return self

    def read(self) -> Optional[np.ndarray]:
        if not self.is_open:
            return None
        ret, frame = self.capture.read()
        if not ret:
            logger.warning("Failed to grab frame")
            return None
        return frame

    def release(self) -> None:
        if self.capture is not None:
            self.capture.release()
            logger.info("Camera released")
        self.capture = None
        self.index = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.release()
