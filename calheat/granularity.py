# calheat/granularity.py
from __future__ import annotations

from .util.dates import UNITS

# Variant names transpose rows and columns of their base layout.
ORIENTATION_PREFIX = "x_"

_RANK = {u: i for i, u in enumerate(UNITS)}


def is_unit(unit: str) -> bool:
    return unit in _RANK


def rank(unit: str) -> int:
    """0 for the finest unit (minute), growing with coarseness."""
    try:
        return _RANK[unit]
    except KeyError:
        raise ValueError(f"Unknown date unit: {unit!r}") from None


def is_coarser(unit: str, other: str) -> bool:
    """True when `unit` is strictly coarser than `other`."""
    return rank(unit) > rank(other)
