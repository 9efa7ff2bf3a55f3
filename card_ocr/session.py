"""
Capture session: decides frame by frame whether a card read is final.

The session is either scanning or paused on a result. A frame with a card
number but no expiration is held back up to `retry_limit` times, since the
date is harder to recognize than the number. Once a record is emitted the
session pauses until the caller resumes it.
"""
import logging
import threading
from dataclasses import replace
from typing import Callable, Iterable, Optional

from .config import MIN_CONFIDENCE, RETRY_LIMIT
from .extractor import extract
from .models import CardCandidate, CardRecord, RecognizedLine, SessionState

logger = logging.getLogger(__name__)

Resume = Callable[[], None]
OnRecord = Callable[[CardRecord, Resume], None]
Dispatch = Callable[[Callable[[], None]], None]


def _call_now(callback: Callable[[], None]) -> None:
    callback()


class CaptureSession:
    """
    Stateful controller fed with one frame at a time.

    Args:
        on_record: Called with the finalized record and a resume action.
        retry_limit: Frames to wait for a missing expiration date.
        dispatch: Hands the emission over to the caller's context. By
            default the record is emitted on the processing context.
        min_confidence: Confidence threshold used by `process_lines`.
    """

    def __init__(
        self,
        on_record: OnRecord,
        retry_limit: int = RETRY_LIMIT,
        dispatch: Optional[Dispatch] = None,
        min_confidence: float = MIN_CONFIDENCE,
    ):
        self.on_record = on_record
        self.dispatch = dispatch or _call_now
        self.min_confidence = min_confidence
        self._state = SessionState(retry_limit=retry_limit)
        self._lock = threading.Lock()
        self._last_record: Optional[CardRecord] = None
        self._stopped = False

    @property
    def state(self) -> SessionState:
        with self._lock:
            return replace(self._state)

    @property
    def is_paused(self) -> bool:
        with self._lock:
            return self._state.is_paused

    @property
    def retry_count(self) -> int:
        with self._lock:
            return self._state.retry_count

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def last_record(self) -> Optional[CardRecord]:
        return self._last_record

    def process_lines(self, lines: Iterable[RecognizedLine]) -> Optional[CardRecord]:
        """Extract a candidate from one frame's lines and process it."""
        return self.process_frame(extract(lines, self.min_confidence))

    def process_frame(self, candidate: CardCandidate) -> Optional[CardRecord]:
        """
        Apply one frame's candidate to the session.

        Returns:
            The emitted record, or None if the frame produced no output.
        """
        with self._lock:
            state = self._state
            if self._stopped or state.is_paused or candidate.card_number is None:
                return None

            if candidate.expiration is None and state.retry_count < state.retry_limit:
                state.retry_count += 1
                logger.debug("Card number without expiration, retry %d/%d",
                             state.retry_count, state.retry_limit)
                return None

            record = CardRecord.from_candidate(candidate)
            state.retry_count = 0
            state.is_paused = True
            self._last_record = record

        logger.info("Card read finalized (%s)", record.card_type)
        self.dispatch(lambda: self._emit(record))
        return record

    def _emit(self, record: CardRecord) -> None:
        if self._stopped:
            logger.debug("Session stopped, discarding result")
            return
        self.on_record(record, self.resume)

    def resume(self) -> None:
        """Drop the finalized result and go back to scanning."""
        with self._lock:
            if not self._state.is_paused:
                return
            self._state.is_paused = False
            self._last_record = None
        logger.info("Scanning resumed")

    def stop(self) -> None:
        """Stop for good; later frames and pending emissions are discarded."""
        with self._lock:
            self._stopped = True
        logger.info("Capture session stopped")
