# calheat/domain.py
from __future__ import annotations

import bisect
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .interval import generate_intervals, intervals_between
from .model import SubDomain
from .util.dates import DateHelper, DateLike

# (domain key, index of the key in the merged collection) -> subdomain records
SubDomainFactory = Callable[[int, int], List[SubDomain]]


class DomainCollection:
    """Sorted, duplicate-free set of domain bucket starts with their subdomains.

    Every mutating operation returns the collection itself so calls can be
    chained: `window.clamp(lo, hi).slice(12, from_end=True)`.
    """

    def __init__(self, keys: Iterable[int] = ()) -> None:
        self._subdomains: Dict[int, List[SubDomain]] = {}
        for k in keys:
            self._subdomains.setdefault(int(k), [])
        self.keys: List[int] = sorted(self._subdomains)
        # keys evicted by the last merge(), ascending
        self.yanked: List[int] = []

    @classmethod
    def from_interval(cls, dates: DateHelper, unit: str, anchor: DateLike, range_: int) -> "DomainCollection":
        return cls(generate_intervals(dates, unit, anchor, range_))

    @classmethod
    def between(cls, dates: DateHelper, unit: str, a: DateLike, b: DateLike) -> "DomainCollection":
        return cls(intervals_between(dates, unit, a, b))

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self.keys))

    def __contains__(self, key: object) -> bool:
        return key in self._subdomains

    def __repr__(self) -> str:
        return f"DomainCollection({self.keys!r})"

    @property
    def min(self) -> Optional[int]:
        return self.keys[0] if self.keys else None

    @property
    def max(self) -> Optional[int]:
        return self.keys[-1] if self.keys else None

    def at(self, index: int) -> Optional[int]:
        if 0 <= index < len(self.keys):
            return self.keys[index]
        return None

    def subdomains(self, key: int) -> List[SubDomain]:
        """Subdomain records of the bucket `key` (KeyError when absent)."""
        return self._subdomains[key]

    def items(self) -> Iterator[Tuple[int, List[SubDomain]]]:
        for k in list(self.keys):
            yield k, self._subdomains[k]

    # --- mutations ------------------------------------------------------------

    def _insert(self, key: int, subdomains: List[SubDomain]) -> None:
        self._subdomains[key] = subdomains
        bisect.insort(self.keys, key)

    def _remove(self, key: int) -> None:
        del self._subdomains[key]
        self.keys.remove(key)

    def merge(self, other: "DomainCollection", limit: int, factory: SubDomainFactory) -> "DomainCollection":
        """Insert the keys of `other` that are not present yet.

        `factory(key, index)` materializes the subdomains of each inserted key
        only; existing keys keep their records. While the collection holds
        `limit` keys or more, each insertion evicts from the opposite side:
        a key past the current max evicts the min, any other key evicts the max.
        An empty `other` leaves everything untouched, `yanked` included.
        """
        if not other.keys:
            return self
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.yanked = []
        for index, key in enumerate(other.keys):
            if key in self._subdomains:
                continue
            if len(self.keys) >= limit:
                evict = self.keys[0] if key > self.keys[-1] else self.keys[-1]
                self._remove(evict)
                self.yanked.append(evict)
            self._insert(key, factory(key, index))
        self.yanked.sort()
        return self

    def clamp(self, min_key: Optional[int] = None, max_key: Optional[int] = None) -> "DomainCollection":
        """Drop keys outside [min_key, max_key]; a None bound is open."""
        if min_key is None and max_key is None:
            return self
        for key in list(self.keys):
            if (min_key is not None and key < min_key) or (max_key is not None and key > max_key):
                self._remove(key)
        return self

    def slice(self, limit: int, from_end: bool = True) -> "DomainCollection":
        """Keep at most `limit` keys: the last ones when `from_end`, else the first ones.

        A window grown forward is sliced from the end (its earliest keys go),
        a window grown backward from the start.
        """
        limit = max(0, limit)
        if len(self.keys) <= limit:
            return self
        keep = self.keys[len(self.keys) - limit:] if from_end else self.keys[:limit]
        kept = set(keep)
        for key in self.keys:
            if key not in kept:
                del self._subdomains[key]
        self.keys = list(keep)
        return self

    def clear(self) -> None:
        self._subdomains.clear()
        self.keys = []
        self.yanked = []
