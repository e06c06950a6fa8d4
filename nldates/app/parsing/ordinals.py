"""
Ordinal day-of-month vocabulary ("first", "twenty-first", "31st", "15").
"""

from __future__ import annotations

import re


ORDINAL_WORDS: dict[str, int] = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
    "eleventh": 11,
    "twelfth": 12,
    "thirteenth": 13,
    "fourteenth": 14,
    "fifteenth": 15,
    "sixteenth": 16,
    "seventeenth": 17,
    "eighteenth": 18,
    "nineteenth": 19,
    "twentieth": 20,
    "twenty first": 21,
    "twenty-first": 21,
    "twenty second": 22,
    "twenty-second": 22,
    "twenty third": 23,
    "twenty-third": 23,
    "twenty fourth": 24,
    "twenty-fourth": 24,
    "twenty fifth": 25,
    "twenty-fifth": 25,
    "twenty sixth": 26,
    "twenty-sixth": 26,
    "twenty seventh": 27,
    "twenty-seventh": 27,
    "twenty eighth": 28,
    "twenty-eighth": 28,
    "twenty ninth": 29,
    "twenty-ninth": 29,
    "thirtieth": 30,
    "thirty first": 31,
    "thirty-first": 31,
}

# Longest words first so "twenty-first" wins over "first".
_WORD_ALTERNATION = "|".join(re.escape(w) for w in sorted(ORDINAL_WORDS, key=len, reverse=True))

ORDINAL_NUMBER_PATTERN = rf"(?:{_WORD_ALTERNATION}|[0-9]{{1,2}}(?:st|nd|rd|th)?)"

_ORDINAL_ONLY_RE = re.compile(rf"^\s*({ORDINAL_NUMBER_PATTERN})\s*$", re.I)
_SUFFIX_RE = re.compile(r"(?:st|nd|rd|th)$", re.I)


def parse_ordinal(token: str) -> int | None:
    """
    Convert an ordinal token to its number.
    Returns None when the token is neither a known word nor digits.
    """
    num = (token or "").strip().lower()
    if num in ORDINAL_WORDS:
        return ORDINAL_WORDS[num]
    num = _SUFFIX_RE.sub("", num)
    if not num.isdigit():
        return None
    return int(num)


def match_ordinal_day(text: str) -> int | None:
    """Return the day number when the whole text is a single ordinal in 1..31."""
    m = _ORDINAL_ONLY_RE.match(text or "")
    if not m:
        return None
    day = parse_ordinal(m.group(1))
    if day is None or not 1 <= day <= 31:
        return None
    return day
