"""
Pattern matchers for a single line of recognized card text.

Every function here looks at one line in isolation. Confidence filtering
happens in the extractor, not here.
"""
import re
from typing import Optional

from .config import BOUNDARY_CHARS
from .models import Expiration

# ============================================================
#  PATTERNS
# ============================================================
CARD_NUMBER_RE = re.compile(r"(?:\d[ ]*?){13,16}")
QUICK_READ_RE = re.compile(r"^[/\[\]|\\]?(\d{4})")
EXPIRATION_RE = re.compile(r"(0[1-9]|1[0-2])/(\d{4}|\d{2})")


# ============================================================
#  CARD NUMBER
# ============================================================
def match_card_number(text: str) -> Optional[str]:
    """Return the first 13-16 digit run in `text` with its spaces removed."""
    match = CARD_NUMBER_RE.search(text)
    if match is None:
        return None
    return match.group(0).replace(" ", "")


# ============================================================
#  QUICK-READ NUMBER
# ============================================================
def match_quick_read_number(text: str) -> Optional[str]:
    """
    Return a leading 4-digit group that sits between boundary characters.

    Quick-read cards print the number as four separated groups, so each
    group is usually recognized on its own line, e.g. "|4111|" or "4111 /".
    The group is only accepted when the line is exactly the 4 digits, or a
    boundary character is found right before it (first character) or right
    after it (5th or 6th character, allowing one space).
    """
    match = QUICK_READ_RE.match(text)
    if match is None:
        return None
    group = match.group(1)

    if len(text) == 4:
        return group
    if text[0] in BOUNDARY_CHARS:
        return group
    if text[4] in BOUNDARY_CHARS:
        return group
    if len(text) > 5 and text[5] in BOUNDARY_CHARS:
        return group
    return None


# ============================================================
#  EXPIRATION DATE
# ============================================================
def match_expiration(text: str) -> Optional[Expiration]:
    """
    Return the (month, year) of the last MM/YY or MM/YYYY date in `text`.

    Cards often print "valid from" before "valid thru", so the rightmost
    date is taken.
    """
    matches = list(EXPIRATION_RE.finditer(text))
    if not matches:
        return None
    month_string, year_string = matches[-1].groups()
    if len(year_string) == 2:
        year_string = "20" + year_string
    try:
        return Expiration(month=int(month_string), year=int(year_string))
    except ValueError:
        return None
