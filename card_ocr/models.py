from dataclasses import dataclass
from typing import NamedTuple, Optional

from .config import FIRST_NUMBER, RETRY_LIMIT


class Expiration(NamedTuple):
    month: int
    year: int


@dataclass(frozen=True)
class RecognizedLine:
    """One OCR text observation for a frame."""
    text: str
    confidence: float


@dataclass(frozen=True)
class CardCandidate:
    """Tentative extraction result for a single frame."""
    card_number: Optional[str] = None
    expiration: Optional[Expiration] = None

    @property
    def is_empty(self) -> bool:
        return self.card_number is None


@dataclass(frozen=True)
class CardRecord:
    """
    Finalized card data handed to the caller.

    The card number is always 13-16 digits. Expiration month and year are
    either both set or both None.
    """
    card_number: str
    expiration_month: Optional[int] = None
    expiration_year: Optional[int] = None

    def __post_init__(self):
        if not (self.card_number.isdigit() and 13 <= len(self.card_number) <= 16):
            raise ValueError(f"Invalid card number: {self.card_number!r}")
        if (self.expiration_month is None) != (self.expiration_year is None):
            raise ValueError("Expiration month and year must be set together")
        if self.expiration_month is not None and not 1 <= self.expiration_month <= 12:
            raise ValueError(f"Invalid expiration month: {self.expiration_month}")

    @classmethod
    def from_candidate(cls, candidate: CardCandidate) -> "CardRecord":
        if candidate.card_number is None:
            raise ValueError("Candidate has no card number")
        if candidate.expiration is None:
            return cls(candidate.card_number)
        return cls(candidate.card_number,
                   expiration_month=candidate.expiration.month,
                   expiration_year=candidate.expiration.year)

    # ============================================================
    #  DISPLAY HELPERS
    # ============================================================
    @property
    def expiration_year_string(self) -> Optional[str]:
        """Year of expiration as a 2 digit string."""
        if self.expiration_year is None:
            return None
        return str(self.expiration_year)[-2:]

    @property
    def expiration_year_string_full(self) -> Optional[str]:
        if self.expiration_year is None:
            return None
        return str(self.expiration_year)

    @property
    def expiration_month_string(self) -> Optional[str]:
        """Month of expiration, always 2 digits (e.g. "09")."""
        if self.expiration_month is None:
            return None
        return f"{self.expiration_month:02d}"

    @property
    def expiration_date_display(self) -> Optional[str]:
        """Expiration as "MM/YY"."""
        if self.expiration_month is None:
            return None
        return f"{self.expiration_month_string}/{self.expiration_year_string}"

    @property
    def card_number_display(self) -> str:
        """Card number with a space every 4 digits."""
        number = self.card_number
        return " ".join(number[i:i + 4] for i in range(0, len(number), 4))

    @property
    def card_type(self) -> str:
        return FIRST_NUMBER.get(self.card_number[0], "Unknown")

    def to_dict(self) -> dict:
        return {
            'card_number': self.card_number,
            'card_type': self.card_type,
            'expiration_month': self.expiration_month,
            'expiration_year': self.expiration_year,
            'expiration': self.expiration_date_display,
        }


@dataclass
class SessionState:
    is_paused: bool = False
    retry_count: int = 0
    retry_limit: int = RETRY_LIMIT
