# src/spectconv/core/factors.py
"""Working-size selection: lengths composed of small FFT-friendly factors."""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Optional, Tuple

__all__ = [
    "DEFAULT_FACTORS",
    "normalize_factors",
    "factorize",
    "is_composite_of",
    "find_closest_factor",
]

# Radices for which mixed-radix complex transforms are cheap.
DEFAULT_FACTORS: Tuple[int, ...] = (7, 6, 5, 4, 3, 2)


def normalize_factors(allowed_factors: Iterable[int]) -> Tuple[int, ...]:
    """
    Validate a factor set and return it as a tuple sorted largest first.

    Raises
    ------
    ValueError
        If the set is empty or holds anything but integers >= 2.
    """
    factors = []
    for f in allowed_factors:
        if isinstance(f, bool) or int(f) != f:
            raise ValueError(f"Factors must be integers, got {f!r}")
        f = int(f)
        if f < 2:
            raise ValueError(f"Factors must be >= 2, got {f}")
        if f not in factors:
            factors.append(f)
    if not factors:
        raise ValueError("At least one allowed factor is required")
    return tuple(sorted(factors, reverse=True))


@lru_cache(maxsize=4096)
def _decompose(n: int, factors: Tuple[int, ...]) -> Optional[Tuple[int, ...]]:
    # depth-first, largest factor first; 1 is the empty product
    if n == 1:
        return ()
    for f in factors:
        if n % f == 0:
            rest = _decompose(n // f, factors)
            if rest is not None:
                return (f,) + rest
    return None


def factorize(n: int, allowed_factors: Iterable[int] = DEFAULT_FACTORS) -> Optional[Tuple[int, ...]]:
    """
    Decompose `n` into a product of values from `allowed_factors`.

    Parameters
    ----------
    n : int
        Length to decompose (>= 1).
    allowed_factors : iterable of int
        Factors that may be used, with repetition.

    Returns
    -------
    tuple[int, ...] | None
        One decomposition (largest factors first), ``()`` for ``n == 1``,
        or None if `n` is not reachable.
    """
    n = int(n)
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    # recursion depth is bounded by log2(n)
    return _decompose(n, normalize_factors(allowed_factors))


def is_composite_of(n: int, allowed_factors: Iterable[int] = DEFAULT_FACTORS) -> bool:
    """True if `n` (>= 2) is a product of one or more allowed factors."""
    return n >= 2 and factorize(n, allowed_factors) is not None


def find_closest_factor(minimum: int, allowed_factors: Iterable[int] = DEFAULT_FACTORS) -> int:
    """
    Smallest integer >= `minimum` expressible as a product of allowed factors.

    The search scans candidates upward from
    ``max(minimum, min(allowed_factors))`` and tests each one by
    decomposition. It always terminates because every power of an allowed
    factor is reachable.

    Parameters
    ----------
    minimum : int
        Minimum required length (>= 1).
    allowed_factors : iterable of int
        Factor set, default ``DEFAULT_FACTORS``.

    Returns
    -------
    int
        The selected length. Lengths already composed of the factors are
        returned unchanged.
    """
    minimum = int(minimum)
    if minimum < 1:
        raise ValueError(f"minimum must be >= 1, got {minimum}")
    factors = normalize_factors(allowed_factors)
    n = max(minimum, min(factors))
    while factorize(n, factors) is None:
        n += 1
    return n
