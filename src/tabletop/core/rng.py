"""
Seeded random number generation.

Every bot "Easy" tier and the Sudoku generator draw from an Rng that the caller
passes in explicitly. There is no module-level generator.

The core generator is mulberry32 (32-bit state). String seeds are hashed with
FNV-1a over UTF-16 code units, so a given seed yields the same sequence as the
browser build of these games did.
"""

from __future__ import annotations

import math
import random
import re
from typing import Callable, Optional, Sequence, TypeVar, Union
from urllib.parse import parse_qs

T = TypeVar("T")

Seed = Union[int, float, str]

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) seeded with a 32-bit integer."""
    state = seed & _MASK32

    def generate() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    return generate


def seed_from_string(text: str) -> int:
    """FNV-1a 32-bit hash of a string, used to turn arbitrary text into a seed."""
    data = text.encode("utf-16-le", "surrogatepass")
    h = _FNV_OFFSET
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def _seed_to_uint32(seed: Seed) -> int:
    if isinstance(seed, str):
        return seed_from_string(seed)
    # Truncate toward zero, then wrap (matches a JS `seed >>> 0`)
    return int(seed) & _MASK32


class Rng:
    """
    Deterministic pseudo-random source.

    Two instances built from the same seed produce identical sequences forever.
    An instance built without a seed draws from platform entropy instead.
    """

    __slots__ = ("seed", "_next")

    def __init__(self, seed: Optional[Seed] = None):
        if seed is None:
            self.seed: Optional[int] = None
            self._next = random.SystemRandom().random
        else:
            self.seed = _seed_to_uint32(seed)
            self._next = mulberry32(self.seed)

    @property
    def deterministic(self) -> bool:
        return self.seed is not None

    def next(self) -> float:
        """Float in [0, 1)."""
        return self._next()

    def next_int(self, max_exclusive: int) -> int:
        """Integer in [0, max_exclusive)."""
        if not math.isfinite(max_exclusive) or max_exclusive <= 0:
            raise ValueError("next_int(max_exclusive): max_exclusive must be a positive finite number")
        return math.floor(self._next() * max_exclusive)

    def uniform(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        if not (math.isfinite(low) and math.isfinite(high)) or high <= low:
            raise ValueError("uniform(low, high): require finite numbers with high > low")
        return low + (high - low) * self._next()

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both ends inclusive."""
        if not (math.isfinite(low) and math.isfinite(high)) or high < low:
            raise ValueError("randint(low, high): require finite numbers with high >= low")
        start = math.ceil(low)
        span = math.floor(high) - start + 1
        if span <= 0:
            return start
        return start + math.floor(self._next() * span)

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy (Fisher-Yates). The input is left untouched."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = math.floor(self._next() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out

    def pick(self, items: Sequence[T]) -> Optional[T]:
        """Return one element, or None for an empty sequence."""
        if len(items) == 0:
            return None
        return items[math.floor(self._next() * len(items))]

    def __repr__(self) -> str:
        return f"Rng(seed={self.seed})"


def create_rng(seed: Optional[Seed] = None) -> Rng:
    """Build an Rng. Omitting the seed falls back to platform entropy."""
    return Rng(seed)


def seed_from_query(query: Optional[str]) -> Optional[str]:
    """Extract the raw ``seed`` parameter from a URL query string, if any."""
    if not query:
        return None
    params = parse_qs(query[1:] if query.startswith("?") else query, keep_blank_values=True)
    values = params.get("seed")
    return values[0] if values else None


# Number literal grammar of a browser's Number(text): ASCII decimals with an
# optional exponent, or an unsigned 0x / 0o / 0b integer. No digit separators.
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_PREFIXED = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


def _as_number(text: str) -> Optional[float]:
    body = text.strip()
    if _PREFIXED.fullmatch(body):
        try:
            value = float(int(body, 0))
        except OverflowError:
            return None
    elif _DECIMAL.fullmatch(body):
        value = float(body)
    else:
        return None
    return value if math.isfinite(value) else None


def parse_seed(raw: str) -> Seed:
    """Numeric text becomes a number, anything else stays a string to be hashed."""
    number = _as_number(raw)
    return number if number is not None else raw


def rng_from_query(query: Optional[str]) -> Rng:
    """
    Rng seeded from a URL query's ``seed`` parameter.

    Numeric strings are used as numbers, anything else is hashed. With no
    seed present the generator is non-deterministic.
    """
    raw = seed_from_query(query)
    if raw is None:
        return create_rng()
    return create_rng(parse_seed(raw))
