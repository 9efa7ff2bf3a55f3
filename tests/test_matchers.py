"""Tests for single-line card field matchers."""
import pytest

from card_ocr.matchers import match_card_number, match_expiration, match_quick_read_number
from card_ocr.models import Expiration


class TestCardNumber:
    """Tests for full card number matching."""

    def test_spaced_number_is_stripped(self):
        assert match_card_number("4111 1234 5678 9010") == "4111123456789010"

    @pytest.mark.parametrize("text,expected", [
        ("4111111111111", "4111111111111"),
        ("378282246310005", "378282246310005"),
        ("5500000000000004", "5500000000000004"),
    ])
    def test_accepts_13_to_16_digits(self, text, expected):
        assert match_card_number(text) == expected

    def test_number_embedded_in_text(self):
        assert match_card_number("CARD NO 5500 0000 0000 0004 VISA") == "5500000000000004"

    def test_too_short_is_ignored(self):
        assert match_card_number("123456789012") is None
        assert match_card_number("4111 1234") is None

    def test_longer_run_is_cut_at_16(self):
        assert match_card_number("41111111111111112222") == "4111111111111111"

    def test_first_match_wins(self):
        text = "4111111111111111 5500000000000004"
        assert match_card_number(text) == "4111111111111111"

    def test_no_digits(self):
        assert match_card_number("JOHN SMITH") is None


class TestQuickReadNumber:
    """Tests for 4-digit quick-read group matching."""

    @pytest.mark.parametrize("text", ["4111", "|4111", "/4111", "[4111", "\\4111", "4111|", "4111]", "4111 |", "[4111]"])
    def test_bounded_group(self, text):
        assert match_quick_read_number(text) == "4111"

    @pytest.mark.parametrize("text", ["41112", "4111 2222", "4111 ab", "A4111|", "411", ""])
    def test_unbounded_or_missing_group(self, text):
        assert match_quick_read_number(text) is None

    def test_only_leading_group_is_used(self):
        assert match_quick_read_number("1234|5678") == "1234"


class TestExpiration:
    """Tests for expiration date matching."""

    def test_short_year_is_expanded(self):
        assert match_expiration("12/25") == Expiration(month=12, year=2025)

    def test_full_year(self):
        assert match_expiration("EXP 03/2031") == Expiration(month=3, year=2031)

    def test_last_date_wins(self):
        assert match_expiration("VALID 01/20 THRU 09/25") == Expiration(month=9, year=2025)

    @pytest.mark.parametrize("text", ["13/25", "00/25", "1/25", "05/2", "NO DATE"])
    def test_invalid_dates(self, text):
        assert match_expiration(text) is None
