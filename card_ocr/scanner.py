"""
Live card scanner.

Frames are read and recognized on a dedicated processing thread that is the
only writer of the capture session. Finalized records are queued and
delivered to the caller's thread by `poll()`.
"""
import logging
import queue
import threading
import time
from typing import Callable, Iterable, Optional

import numpy as np

from .camera import Camera
from .config import ScannerConfig
from .errors import CardReaderError
from .extractor import extract
from .models import CardCandidate, CardRecord, RecognizedLine
from .ocr import OCRBackend
from .session import CaptureSession, Resume

logger = logging.getLogger(__name__)

OnSuccess = Callable[[CardRecord, Resume], None]
OnFailure = Callable[[CardReaderError], None]

READ_RETRY_DELAY = 0.01


class CardScanner:
    """
    Ties a camera, an OCR backend and a capture session together.

    Args:
        backend: OCR backend used on every frame.
        on_success: Receives each record and the action that resumes scanning.
        on_failure: Receives camera failures. If omitted they are raised
            from `start()`.
        config: Scanner tunables.
        camera: Camera to read from; built from `config` when omitted.
    """

    def __init__(
        self,
        backend: OCRBackend,
        on_success: OnSuccess,
        on_failure: Optional[OnFailure] = None,
        config: Optional[ScannerConfig] = None,
        camera: Optional[Camera] = None,
    ):
        self.backend = backend
        self.on_success = on_success
        self.on_failure = on_failure
        self.config = config or ScannerConfig()
        self.camera = camera or Camera(
            indices=self.config.camera_indices,
            width=self.config.frame_width,
            height=self.config.frame_height,
        )
        self._results: "queue.Queue" = queue.Queue()
        self._pending = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_frame: Optional[np.ndarray] = None
        self.session = self._new_session()

    def _new_session(self) -> CaptureSession:
        return CaptureSession(
            self.on_success,
            retry_limit=self.config.retry_limit,
            dispatch=self._dispatch,
            min_confidence=self.config.min_confidence,
        )

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        """Most recent camera frame, for previews."""
        return self._last_frame

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ============================================================
    #  LIFECYCLE
    # ============================================================
    def start(self) -> bool:
        """
        Open the camera and start processing frames.

        Returns:
            bool: True if scanning started
        """
        if self.is_running:
            return True

        try:
            self.camera.open()
        except CardReaderError as e:
            logger.error("Camera failure: %s", e)
            if self.on_failure is None:
                raise
            self.on_failure(e)
            return False

        if self.session.is_stopped:
            self.session = self._new_session()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="card-ocr-frames", daemon=True)
        self._thread.start()
        logger.info("Scanner started")
        return True

    def stop(self) -> None:
        """Hard stop: nothing processed or delivered after this returns."""
        self._stop_event.set()
        self.session.stop()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        self._last_frame = None
        self.camera.release()
        self._drain()
        logger.info("Scanner stopped")

    def _drain(self) -> None:
        self._pending = None
        while True:
            try:
                self._results.get_nowait()
            except queue.Empty:
                return

    # ============================================================
    #  PROCESSING CONTEXT
    # ============================================================
    def _run(self) -> None:
        while not self._stop_event.is_set():
            frame = self.camera.read()
            if frame is None:
                if not self.camera.is_open:
                    logger.error("Camera closed, stopping frame processing")
                    break
                time.sleep(READ_RETRY_DELAY)
                continue
            self._last_frame = frame

            if self.session.is_paused:
                continue

            try:
                lines = self.backend.recognize(frame)
                # Results that finish after stop() are dropped
                if self._stop_event.is_set():
                    break
                self.session.process_lines(lines)
            except Exception:
                logger.exception("Failed to process frame, skipping")
                continue

    def process_frame(self, lines: Iterable[RecognizedLine]) -> Optional[CardRecord]:
        """Feed one frame's recognized lines from an external OCR pipeline."""
        return self.session.process_lines(lines)

    def scan_image(self, image: np.ndarray) -> CardCandidate:
        """Run OCR and extraction on a single still image, without session gating."""
        return extract(self.backend.recognize(image), self.config.min_confidence)

    # ============================================================
    #  CALLER CONTEXT
    # ============================================================
    def _dispatch(self, callback: Callable[[], None]) -> None:
        self._results.put((time.monotonic() + self.config.emit_delay, callback))

    def poll(self) -> int:
        """
        Deliver queued records whose delay has passed. Call from the caller's loop.

        Returns:
            int: number of records delivered
        """
        delivered = 0
        while True:
            if self._pending is None:
                try:
                    self._pending = self._results.get_nowait()
                except queue.Empty:
                    break
            due, callback = self._pending
            if due > time.monotonic():
                break
            self._pending = None
            if self._stop_event.is_set():
                continue
            callback()
            delivered += 1
        return delivered
