from __future__ import annotations
import math


def is_power_of_two(n) -> bool:
    """True for positive ints with a single bit set. Floats and bools are rejected."""
    if isinstance(n, bool) or not isinstance(n, int):
        return False
    return n > 0 and (n & (n - 1)) == 0


def ilog2(n: int) -> int:
    """Exact base-2 log of a power of two."""
    if not is_power_of_two(n):
        raise ValueError(f"ilog2 requires a power of two, got {n!r}")
    return n.bit_length() - 1


def ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def round_half_away(x: float) -> int:
    """Rounds to the nearest integer, ties away from zero (C llround)."""
    magnitude = abs(x)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(whole) if x >= 0 else -int(whole)
