import logging
from typing import Iterable, List, Optional

from .config import MIN_CONFIDENCE
from .matchers import match_card_number, match_expiration, match_quick_read_number
from .models import CardCandidate, Expiration, RecognizedLine

logger = logging.getLogger(__name__)

QUICK_READ_GROUPS = 4


def extract(lines: Iterable[RecognizedLine], min_confidence: float = MIN_CONFIDENCE) -> CardCandidate:
    """
    Resolve all recognized lines of one frame into at most one card candidate.

    Lines are visited in the order the OCR engine returned them. A full card
    number wins over quick-read groups; quick-read groups only count when
    exactly four were found. Two expiration dates in one frame cancel each
    other out.
    """
    card_number: Optional[str] = None
    quick_read_numbers: List[str] = []
    expiration: Optional[Expiration] = None
    expiration_ambiguous = False

    for line in lines:
        if line.confidence <= min_confidence:
            continue
        text = line.text

        # The first card number found in the frame wins
        number = match_card_number(text) if card_number is None else None
        if number is not None:
            card_number = number
            continue

        quick_read = match_quick_read_number(text)
        if quick_read is not None:
            quick_read_numbers.append(quick_read)
            continue

        date = match_expiration(text)
        if date is None:
            continue
        if expiration is not None or expiration_ambiguous:
            # Can't tell "valid from" and "valid thru" apart across lines.
            # Once ambiguous, every later date in the frame is discarded too.
            expiration = None
            expiration_ambiguous = True
        else:
            expiration = date

    if card_number is not None:
        logger.debug("Frame resolved card number (expiration=%s)", expiration)
        return CardCandidate(card_number, expiration)

    if len(quick_read_numbers) == QUICK_READ_GROUPS:
        logger.debug("Frame resolved quick-read number from %d groups", QUICK_READ_GROUPS)
        return CardCandidate("".join(quick_read_numbers), expiration)

    if quick_read_numbers:
        logger.debug("Ignoring %d quick-read groups", len(quick_read_numbers))
    return CardCandidate()
