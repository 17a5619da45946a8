"""
Small text formatting helpers used by the terminal front end.
"""

from __future__ import annotations

import math
from typing import Sequence


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """'1 attempt', '2 attempts', '3 classes', or the given plural."""
    if count == 1:
        word = singular
    elif plural is not None:
        word = plural
    else:
        word = singular + ("es" if singular.endswith("s") else "s")
    return f"{count} {word}"


def format_ordinal(n: int) -> str:
    v = abs(int(n)) % 100
    if 11 <= v <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(v % 10, "th")
    return f"{n}{suffix}"


def format_range(low: int, high: int, separator: str = "–") -> str:
    return f"{low}{separator}{high}"


def format_score(score: int) -> str:
    """Thousands separated: 10000 -> '10,000'."""
    return f"{score:,}"


def format_list(items: Sequence[str], conjunction: str = "and") -> str:
    """'A', 'A and B', 'A, B, and C'."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} {conjunction} {items[1]}"
    return f"{', '.join(items[:-1])}, {conjunction} {items[-1]}"


def capitalize(text: str) -> str:
    # Unlike str.capitalize, leaves the rest of the string alone
    return text[:1].upper() + text[1:]


def format_elapsed_ms(total_ms: float) -> str:
    if total_ms < 1000:
        return f"{math.floor(total_ms + 0.5)}ms"
    total_seconds = int(total_ms // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    if minutes == 0:
        return f"{seconds}s"
    return f"{minutes}m {seconds}s"
