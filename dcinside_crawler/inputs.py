from __future__ import annotations

from typing import Optional

from dcinside_crawler.errors import InputValidationError
from dcinside_crawler.models import BoardType

BOARD_TYPE_CHOICES = {
    "1": BoardType.ALL,
    "2": BoardType.RECOMMEND,
    "3": BoardType.NOTICE,
}


def parse_number(text: Optional[str], default: int) -> int:
    """
    Parse a positive integer typed at a prompt.

    Blank input falls back to `default`; anything else must be a positive integer.
    """
    raw = (text or "").strip()
    if not raw:
        return default
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        raise InputValidationError(f"Not a positive integer: {raw!r}")
    return int(raw)


def parse_post_numbers(text: Optional[str]) -> list[str]:
    """Split a comma separated post number list, e.g. "101, 102,103"."""
    tokens = [t.strip() for t in (text or "").split(",")]
    numbers = [t for t in tokens if t]
    if not numbers:
        raise InputValidationError("No post numbers given")

    bad = [t for t in numbers if not (t.isascii() and t.isdigit()) or int(t) < 1]
    if bad:
        raise InputValidationError(f"Invalid post numbers: {', '.join(bad)}")
    return numbers


def parse_board_type(choice: Optional[str]) -> BoardType:
    key = (choice or "").strip() or "1"
    try:
        return BOARD_TYPE_CHOICES[key]
    except KeyError:
        raise InputValidationError(f"Unknown board choice: {key!r}") from None
