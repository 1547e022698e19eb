"""Number words and roman numerals used by script markers."""

from __future__ import annotations

import re

WORD_NUMBERS: dict[str, int] = {
    "ONE": 1,
    "TWO": 2,
    "THREE": 3,
    "FOUR": 4,
    "FIVE": 5,
    "SIX": 6,
    "SEVEN": 7,
    "EIGHT": 8,
    "NINE": 9,
    "TEN": 10,
    "ELEVEN": 11,
    "TWELVE": 12,
    "THIRTEEN": 13,
    "FOURTEEN": 14,
    "FIFTEEN": 15,
    "SIXTEEN": 16,
    "SEVENTEEN": 17,
    "EIGHTEEN": 18,
    "NINETEEN": 19,
    "TWENTY": 20,
    "TWENTY-ONE": 21,
    "TWENTY ONE": 21,
    "TWENTYONE": 21,
    "TWENTY-TWO": 22,
    "TWENTY TWO": 22,
    "TWENTYTWO": 22,
}

ROMAN_NUMERALS: dict[str, int] = {
    "I": 1,
    "II": 2,
    "III": 3,
    "IV": 4,
    "V": 5,
    "VI": 6,
    "VII": 7,
    "VIII": 8,
    "IX": 9,
    "X": 10,
}

# Longest words first so SEVENTEEN is never read as SEVEN.
PAGE_WORDS_ONE_TO_TWENTY = "|".join(
    sorted(
        (word for word, value in WORD_NUMBERS.items() if value <= 20),
        key=len,
        reverse=True,
    )
)

_LEADING_DIGITS = re.compile(r"^\d+")


def word_to_number(word: str) -> int:
    """Convert a spelled-out or numeric token to an int.

    Returns 0 when the token is neither a known number word nor starts
    with digits.
    """
    upper = word.upper().strip()
    if upper in WORD_NUMBERS:
        return WORD_NUMBERS[upper]
    match = _LEADING_DIGITS.match(upper)
    return int(match.group(0)) if match else 0


def marker_number(token: str, default: int = 1) -> int:
    """Convert an act or scene number token (word, roman, digits)."""
    upper = token.upper().strip()
    if upper in ROMAN_NUMERALS:
        return ROMAN_NUMERALS[upper]
    return word_to_number(upper) or default
