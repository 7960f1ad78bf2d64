"""
Numeric command parameters.

Integers are non-negative digit strings only. Ranges are written `lo--hi`
with hi > lo >= 0 and resolve to one uniform draw. Word targets are written
`NW` or `N1W--N2W` (the W is case-insensitive).
"""

import random
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

_COUNT = re.compile(r"[0-9]+")
_COUNT_RANGE = re.compile(r"([0-9]+)--([0-9]+)")
_WORD_COUNT = re.compile(r"([0-9]+)[wW]")
_WORD_RANGE = re.compile(r"([0-9]+)[wW]--([0-9]+)[wW]")
_SIGNED = re.compile(r"-?[0-9]+")


class CountMode(Enum):
    """How a repeat target is measured."""
    CYCLE = "cycle"     # number of full passes
    WORD = "word"       # cumulative output word count


@dataclass(frozen=True)
class Quantity:
    """A resolved repeat target."""
    amount: int
    mode: CountMode


def is_count(text: str) -> bool:
    return _COUNT.fullmatch(text) is not None


def is_count_range(text: str) -> bool:
    m = _COUNT_RANGE.fullmatch(text)
    return m is not None and int(m.group(2)) > int(m.group(1))


def is_word_count(text: str) -> bool:
    return _WORD_COUNT.fullmatch(text) is not None


def is_word_range(text: str) -> bool:
    m = _WORD_RANGE.fullmatch(text)
    return m is not None and int(m.group(2)) > int(m.group(1))


def is_count_or_range(text: str) -> bool:
    return is_count(text) or is_count_range(text)


def is_signed_int(text: str) -> bool:
    return _SIGNED.fullmatch(text) is not None


def range_bounds(text: str) -> tuple:
    """(lo, hi) of a count range or word range."""
    m = _COUNT_RANGE.fullmatch(text) or _WORD_RANGE.fullmatch(text)
    if m is None:
        raise ValueError(f"not a range: {text!r}")
    return int(m.group(1)), int(m.group(2))


def resolve_count(text: str, rng: random.Random) -> int:
    """Resolve an integer or integer range to one number."""
    if is_count(text):
        return int(text)
    if is_count_range(text):
        lo, hi = range_bounds(text)
        return rng.randint(lo, hi)
    raise ValueError(f"not a count or count range: {text!r}")


def parse_quantity(text: str, rng: random.Random) -> Optional[Quantity]:
    """
    Parse a repeat target: count, count range, word count or word range.

    Returns None if the text is none of these.
    """
    if is_word_range(text):
        lo, hi = range_bounds(text)
        return Quantity(rng.randint(lo, hi), CountMode.WORD)
    if is_word_count(text):
        return Quantity(int(text[:-1]), CountMode.WORD)
    if is_count_or_range(text):
        return Quantity(resolve_count(text, rng), CountMode.CYCLE)
    return None
